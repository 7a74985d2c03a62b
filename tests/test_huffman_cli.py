import random

import huffman_cli


def test_compress_then_decompress_files(tmp_path, capsys):
	original = tmp_path / 'input.bin'
	packed = tmp_path / 'input.hf'
	restored = tmp_path / 'restored.bin'
	original.write_bytes(bytes(random.getrandbits(8) for _ in range(3000)) + b'tail' * 200)

	assert huffman_cli.main(['compress', str(original), str(packed)]) == 0
	assert huffman_cli.main(['decompress', str(packed), str(restored)]) == 0

	assert restored.read_bytes() == original.read_bytes()
	out = capsys.readouterr().out
	assert f"Compressed: {original} -> {packed}" in out
	assert f"Decompressed: {packed} -> {restored}" in out


def test_empty_file_roundtrip(tmp_path):
	original = tmp_path / 'empty'
	packed = tmp_path / 'empty.hf'
	restored = tmp_path / 'empty.out'
	original.write_bytes(b"")

	assert huffman_cli.main(['compress', str(original), str(packed)]) == 0
	assert huffman_cli.main(['decompress', str(packed), str(restored)]) == 0
	assert restored.read_bytes() == b""


def test_bad_input_removes_partial_output(tmp_path, capsys):
	bogus = tmp_path / 'bogus.hf'
	target = tmp_path / 'out.bin'
	bogus.write_bytes(b'not a huffman stream')

	assert huffman_cli.main(['decompress', str(bogus), str(target)]) == 1
	assert not target.exists()
	assert capsys.readouterr().err.startswith('Error: illegal header starts with')


def test_missing_input_file(tmp_path, capsys):
	assert huffman_cli.main(['compress', str(tmp_path / 'nope'), str(tmp_path / 'out')]) == 1
	assert 'Error:' in capsys.readouterr().err


def test_verbose_flag_logs_statistics(tmp_path, caplog):
	original = tmp_path / 'text.txt'
	original.write_bytes(b'verbose statistics ' * 10)

	with caplog.at_level('DEBUG', logger='huffman_service'):
		assert huffman_cli.main(['-v', 'compress', str(original), str(tmp_path / 'text.hf')]) == 0
	assert any('compressed 190 symbols' in r.getMessage() for r in caplog.records)
