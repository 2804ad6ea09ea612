# file: tests/integration_tests/test_decoder_streaming.py
import io
import socket
import threading

import pytest

from csvstream import Decoder, DecoderConfig, ParseError, decode_all, valid

# Each payload must decode identically however the input is split into reads.
CORPUS = {
    "plain": b"id,name,score\n1,alice,90\n2,bob,85\n",
    "crlf": b"id,name\r\n1,\"multi\r\nline\"\r\n\r\n2,x\r\n",
    "quotes": b'"a ""b"" c",d\n"",""\n"x,y","z\n"\n',
    "lone_cr": b"a\rb,c\r\nd,e\r",
    "comments": b"# header\n  # indented\na,b\n#\nc,d\n# trailing",
    "blank_lines": b"\n\n\r\na\n\n\nb",
    "unicode": "naïve,日本語\nçà,ü\n".encode("utf-8"),
}

ERROR_CORPUS = {
    "bare_quote": b'a,b\nc,d"e\n',
    "extraneous_quote": b'a,b\n"c"d,e\n',
    "unterminated": b'a,b\n"c,d\n',
    "field_count": b"a,b\nc,d\ne\n",
}


def decode_with_state(source, config):
    decoder = Decoder(source, config)
    return list(decoder), decoder.bytes_consumed, decoder.line


def decode_until_failure(source):
    decoder = Decoder(source)
    good = []
    with pytest.raises(ParseError) as exc_info:
        for record in decoder:
            good.append(record)
    err = exc_info.value
    return good, type(err), err.kind, err.line, err.column


class TestChunkBoundaryIndependence:
    """Records do not depend on how the input is split into reads."""

    @pytest.mark.parametrize("name", sorted(CORPUS))
    def test_same_records_for_any_split(self, name, chunk_size, chunked):
        data = CORPUS[name]
        config = DecoderConfig(comment="#", fields_per_record=-1, buffer_size=1)
        expected = decode_with_state(data, config)
        actual = decode_with_state(chunked(data, chunk_size), config)
        assert actual == expected
        assert expected[1] == len(data)

    @pytest.mark.parametrize("name", sorted(ERROR_CORPUS))
    def test_same_error_for_any_split(self, name, chunk_size, chunked):
        data = ERROR_CORPUS[name]
        assert decode_until_failure(chunked(data, chunk_size)) == decode_until_failure(data)

    def test_byte_at_a_time_quoted_fields(self, chunked):
        data = CORPUS["quotes"]
        assert decode_all(chunked(data, 1)) == [['a "b" c', "d"], ["", ""], ["x,y", "z\n"]]
        assert valid(data)


class TestRealSources:
    """Decoding from files and sockets."""

    def test_file_on_disk(self, tmp_path):
        path = tmp_path / "scores.csv"
        rows = [[str(i), f"name{i}", "x" * (i % 50)] for i in range(2000)]
        path.write_bytes("".join(",".join(row) + "\r\n" for row in rows).encode("utf-8"))

        with open(path, "rb") as fh:
            decoder = Decoder(fh, buffer_size=64)
            decoded = list(decoder)

        assert decoded == rows
        assert decoder.bytes_consumed == path.stat().st_size
        assert decoder.records_decoded == 2000

    def test_buffered_reader(self, tmp_path):
        path = tmp_path / "small.csv"
        path.write_bytes(CORPUS["plain"])
        with open(path, "rb", buffering=0) as raw, io.BufferedReader(raw, 8) as fh:
            assert decode_all(fh)[-1] == ["2", "bob", "85"]

    def test_socket_stream(self, chunked):
        reader, writer = socket.socketpair()
        payload = CORPUS["crlf"]

        def send():
            with writer:
                for chunk in chunked(payload, 5):
                    writer.sendall(chunk)

        thread = threading.Thread(target=send)
        thread.start()
        try:
            assert decode_all(reader) == decode_all(payload)
        finally:
            thread.join()
            reader.close()
