import pytest
from models.char_language_model.corpus_reader import FileCharacterReader, StringCharacterReader
from models.char_language_model.exceptions import StreamReadError


def read_all(reader):
    characters = []
    while reader.has_more():
        characters.append(reader.read_next_character())
    return "".join(characters)


def test_string_reader_reads_every_character():
    reader = StringCharacterReader("héllo\n")

    assert read_all(reader) == "héllo\n"
    assert not reader.has_more()


def test_string_reader_past_end():
    reader = StringCharacterReader("a")
    reader.read_next_character()

    with pytest.raises(StreamReadError):
        reader.read_next_character()


def test_file_reader_reads_every_character(tmp_path):
    path = tmp_path / "corpus.txt"
    path.write_bytes("line one\r\nline two\nünïcode".encode("utf-8"))

    with FileCharacterReader(path) as reader:
        assert read_all(reader) == "line one\r\nline two\nünïcode"


def test_file_reader_has_more_does_not_consume(tmp_path):
    path = tmp_path / "corpus.txt"
    path.write_text("ab", encoding="utf-8")

    with FileCharacterReader(path) as reader:
        assert reader.has_more()
        assert reader.has_more()
        assert reader.read_next_character() == "a"
        assert reader.read_next_character() == "b"
        assert not reader.has_more()
        with pytest.raises(StreamReadError):
            reader.read_next_character()


def test_file_reader_empty_file(tmp_path):
    path = tmp_path / "empty.txt"
    path.write_text("", encoding="utf-8")

    with FileCharacterReader(path) as reader:
        assert not reader.has_more()


def test_file_reader_missing_file(tmp_path):
    with pytest.raises(StreamReadError, match="Cannot open corpus file"):
        FileCharacterReader(tmp_path / "missing.txt")


def test_file_reader_decoding_error(tmp_path):
    path = tmp_path / "corpus.bin"
    path.write_bytes(b"abc\xff\xfe")

    with FileCharacterReader(path, encoding="utf-8") as reader:
        with pytest.raises(StreamReadError, match="Error reading corpus file"):
            read_all(reader)


def test_file_reader_closed(tmp_path):
    path = tmp_path / "corpus.txt"
    path.write_text("abc", encoding="utf-8")

    reader = FileCharacterReader(path)
    reader.close()

    with pytest.raises(StreamReadError, match="closed"):
        reader.has_more()
