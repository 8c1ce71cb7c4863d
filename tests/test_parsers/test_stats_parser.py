"""Tests for the STATS line parser."""

import pytest

from syslog_ng_exporter.parsers.stats_parser import parse_stat_line
from syslog_ng_exporter.utils.errors import (
    InsufficientFieldsError,
    InvalidObjectTypeError,
    InvalidValueError,
    StatParseError,
)
from syslog_ng_exporter.utils.metrics import StatRecord


class TestParseStatLine:
    """Test suite for parse_stat_line."""

    def test_parses_destination_line(self):
        record = parse_stat_line("dst.file;d_mesg#0;/var/log/messages;a;dropped;0\n")

        assert record == StatRecord(
            object_type="dst.file",
            id="d_mesg#0",
            instance="/var/log/messages",
            state="a",
            metric="dropped",
            value=0.0,
        )

    def test_empty_id_and_instance_are_kept(self):
        record = parse_stat_line("src.none;;;a;processed;0")

        assert record.id == ""
        assert record.instance == ""
        assert record.metric == "processed"

    def test_surrounding_whitespace_is_trimmed(self):
        record = parse_stat_line("  source;s_sys;;a;processed;72  \r\n")

        assert record.object_type == "source"
        assert record.value == 72.0

    def test_instance_with_parentheses_and_commas(self):
        record = parse_stat_line(
            "src.tcp;s_net;afsocket_sd.(stream,AF_INET(0.0.0.0:514));a;connections;3"
        )

        assert record.instance == "afsocket_sd.(stream,AF_INET(0.0.0.0:514))"
        assert record.value == 3.0

    def test_float_and_exponent_values(self):
        assert parse_stat_line("dst.file;d;i;a;memory_usage;12.5").value == 12.5
        assert parse_stat_line("dst.file;d;i;a;memory_usage;1e3").value == 1000.0

    def test_parsing_is_deterministic(self):
        line = "src.internal;s_sys#2;;a;processed;72"
        assert parse_stat_line(line) == parse_stat_line(line)

    @pytest.mark.parametrize("line", [
        "",
        "\n",
        "SourceName",
        "dst.file;d_mesg#0;/var/log/messages;a;dropped",
        "a;b;c;d;e",
    ])
    def test_fewer_than_six_fields(self, line):
        with pytest.raises(InsufficientFieldsError):
            parse_stat_line(line)

    @pytest.mark.parametrize("object_type", ["", "a", "src", "dst"])
    def test_short_object_type(self, object_type):
        with pytest.raises(InvalidObjectTypeError):
            parse_stat_line(f"{object_type};id;inst;a;processed;1")

    def test_non_numeric_value(self):
        with pytest.raises(InvalidValueError):
            parse_stat_line("dst.file;d_mesg#0;/var/log/messages;a;dropped;lots")

    def test_header_line_is_rejected(self):
        with pytest.raises(InvalidValueError):
            parse_stat_line("SourceName;SourceId;SourceInstance;State;Type;Number")

    def test_split_caps_at_six_fields(self):
        # The sixth field keeps its delimiters, so it is not a valid number
        with pytest.raises(InvalidValueError) as exc_info:
            parse_stat_line("dst.file;d;i;a;processed;1;2")

        assert "1;2" in str(exc_info.value)

    def test_errors_share_a_base_class(self):
        for line in ("a;b", "ab;b;c;d;e;1", "abcd;b;c;d;e;x"):
            with pytest.raises(StatParseError):
                parse_stat_line(line)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
