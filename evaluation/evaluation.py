#!/usr/bin/env python3
"""
Evaluation runner for the tree-framed Huffman compressor.

This evaluation script:
- Runs pytest on the tests/ folder and collects individual test outcomes
- Compresses a set of generated corpora and records size, ratio and timings
- Generates a structured JSON report with environment metadata

Run with:
    python evaluation/evaluation.py [--output report.json] [--size-kb 64]
"""
import os
import sys
import json
import uuid
import random
import platform
import subprocess
import time
from datetime import datetime
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
MODULE_DIR = PROJECT_ROOT / "huffproc"
if str(MODULE_DIR) not in sys.path:
    sys.path.insert(0, str(MODULE_DIR))

from huffman_service import HuffmanService  # noqa: E402


def generate_run_id():
    """Generate a short unique run ID."""
    return uuid.uuid4().hex[:8]


def get_git_info():
    """Get git commit and branch information."""
    git_info = {"git_commit": "unknown", "git_branch": "unknown"}
    for key, cmd in (
        ("git_commit", ["git", "rev-parse", "HEAD"]),
        ("git_branch", ["git", "rev-parse", "--abbrev-ref", "HEAD"]),
    ):
        try:
            result = subprocess.run(cmd, capture_output=True, text=True, timeout=5, cwd=str(PROJECT_ROOT))
        except (OSError, subprocess.TimeoutExpired):
            continue
        if result.returncode == 0:
            value = result.stdout.strip()
            git_info[key] = value[:8] if key == "git_commit" else value
    return git_info


def get_environment_info():
    """Collect environment information for the report."""
    git_info = get_git_info()

    return {
        "python_version": platform.python_version(),
        "platform": platform.platform(),
        "os": platform.system(),
        "os_release": platform.release(),
        "architecture": platform.machine(),
        "hostname": platform.node(),
        "git_commit": git_info["git_commit"],
        "git_branch": git_info["git_branch"],
    }


def parse_pytest_verbose_output(output):
    """Parse pytest verbose output to extract test results."""
    tests = []

    for line in output.split('\n'):
        line_stripped = line.strip()

        # Match lines like: tests/test_huffman_service.py::test_roundtrip_empty PASSED
        if '::' not in line_stripped:
            continue
        for status_word, outcome in ((' PASSED', 'passed'), (' FAILED', 'failed'),
                                     (' ERROR', 'error'), (' SKIPPED', 'skipped')):
            if status_word in line_stripped:
                nodeid = line_stripped.split(status_word)[0].strip()
                tests.append({
                    "nodeid": nodeid,
                    "name": nodeid.split("::")[-1],
                    "outcome": outcome,
                })
                break

    return tests


def summarize_tests(tests):
    return {
        "total": len(tests),
        "passed": sum(1 for t in tests if t["outcome"] == "passed"),
        "failed": sum(1 for t in tests if t["outcome"] == "failed"),
        "errors": sum(1 for t in tests if t["outcome"] == "error"),
        "skipped": sum(1 for t in tests if t["outcome"] == "skipped"),
    }


def run_pytest(tests_dir, timeout=600):
    """
    Run pytest on the tests/ folder.

    Returns:
        dict with test results
    """
    print(f"\n{'=' * 60}")
    print("RUNNING TESTS")
    print(f"{'=' * 60}")
    print(f"Tests directory: {tests_dir}")

    cmd = [sys.executable, "-m", "pytest", str(tests_dir), "-v", "--tb=short"]

    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            cwd=str(PROJECT_ROOT),
            env=os.environ.copy(),
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        print("❌ Test execution timed out")
        return {"success": False, "exit_code": -1, "tests": [],
                "summary": {"error": "Test execution timed out"}, "stdout": "", "stderr": ""}

    tests = parse_pytest_verbose_output(result.stdout)
    summary = summarize_tests(tests)
    print(f"\nResults: {summary['passed']} passed, {summary['failed']} failed, "
          f"{summary['errors']} errors, {summary['skipped']} skipped (total: {summary['total']})")

    return {
        "success": result.returncode == 0,
        "exit_code": result.returncode,
        "tests": tests,
        "summary": summary,
        "stdout": result.stdout[-3000:],
        "stderr": result.stderr[-1000:],
    }


def generate_corpora(size, seed=0):
    """Build the named inputs the compressor is measured on."""
    rng = random.Random(seed)
    words = [b"the", b"of", b"and", b"huffman", b"tree", b"code", b"a", b"in", b"stream", b"bit"]
    english = bytearray()
    while len(english) < size:
        english += rng.choice(words) + rng.choice([b" ", b" ", b" ", b", ", b".\n"])

    return {
        "empty": b"",
        "single_repeated": b"A" * size,
        "all_bytes": bytes(range(256)) * max(1, size // 256),
        "english_like": bytes(english[:size]),
        "uniform_random": bytes(rng.getrandbits(8) for _ in range(size)),
    }


def measure_compression(name, data, service=None):
    service = service or HuffmanService()

    t0 = time.perf_counter()
    compressed = service.compress(data)
    t1 = time.perf_counter()
    restored = service.decompress(compressed)
    t2 = time.perf_counter()

    return {
        "name": name,
        "input_bytes": len(data),
        "compressed_bytes": len(compressed),
        "ratio": round(len(compressed) / len(data), 6) if data else None,
        "roundtrip_ok": restored == data,
        "compress_seconds": round(t1 - t0, 6),
        "decompress_seconds": round(t2 - t1, 6),
    }


def run_compression_benchmarks(size):
    print(f"\n{'=' * 60}")
    print(f"COMPRESSION STATISTICS ({size} byte corpora)")
    print(f"{'=' * 60}")

    service = HuffmanService()
    results = []
    for name, data in generate_corpora(size).items():
        stats = measure_compression(name, data, service)
        ratio = f"{stats['ratio']:.3f}" if stats["ratio"] is not None else "n/a"
        status_icon = "✅" if stats["roundtrip_ok"] else "❌"
        print(f"  {status_icon} {name}: {stats['input_bytes']} -> {stats['compressed_bytes']} bytes (ratio {ratio})")
        results.append(stats)
    return results


def generate_output_path():
    """Generate output path in format: evaluation/YYYY-MM-DD/HH-MM-SS/report.json"""
    now = datetime.now()
    output_dir = PROJECT_ROOT / "evaluation" / now.strftime("%Y-%m-%d") / now.strftime("%H-%M-%S")
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir / "report.json"


def main(argv=None):
    """Main entry point for evaluation."""
    import argparse

    parser = argparse.ArgumentParser(description="Run the Huffman compressor evaluation")
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output JSON file path (default: evaluation/YYYY-MM-DD/HH-MM-SS/report.json)"
    )
    parser.add_argument("--size-kb", type=int, default=64, help="size of each generated corpus")
    parser.add_argument("--skip-tests", action="store_true", help="only measure compression")

    args = parser.parse_args(argv)

    run_id = generate_run_id()
    started_at = datetime.now()

    print(f"Run ID: {run_id}")
    print(f"Started at: {started_at.isoformat()}")

    tests = None if args.skip_tests else run_pytest(PROJECT_ROOT / "tests")
    compression = run_compression_benchmarks(args.size_kb * 1024)

    success = all(c["roundtrip_ok"] for c in compression) and (tests is None or tests["success"])

    finished_at = datetime.now()
    duration = (finished_at - started_at).total_seconds()

    report = {
        "run_id": run_id,
        "started_at": started_at.isoformat(),
        "finished_at": finished_at.isoformat(),
        "duration_seconds": round(duration, 6),
        "success": success,
        "environment": get_environment_info(),
        "tests": tests,
        "compression": compression,
    }

    output_path = Path(args.output) if args.output else generate_output_path()
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, "w") as f:
        json.dump(report, f, indent=2)
    print(f"\n✅ Report saved to: {output_path}")

    print(f"\n{'=' * 60}")
    print("EVALUATION COMPLETE")
    print(f"{'=' * 60}")
    print(f"Run ID: {run_id}")
    print(f"Duration: {duration:.2f}s")
    print(f"Success: {'✅ YES' if success else '❌ NO'}")

    return 0 if success else 1


if __name__ == "__main__":
    sys.exit(main())
