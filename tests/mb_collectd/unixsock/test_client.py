"""Tests for the typed command layer against a scripted daemon."""

from datetime import UTC, datetime

import pytest

from mb_collectd.unixsock import UNDEFINED, CollectdClient, ProtocolError, TransportError


@pytest.fixture
def client(daemon):
    """Client connected to the scripted daemon."""
    with CollectdClient.open_unix(daemon.sock_path, timeout=5.0) as c:
        yield c


class TestGetValue:
    """GETVAL."""

    def test_values(self, daemon, client):
        """Reply lines become a name -> float map."""
        daemon.replies['GETVAL "myhost/cpu-0/cpu-idle"'] = "2 Values found\ncpu=42.0\nmem=13.37\n"
        assert client.get_value("myhost/cpu-0/cpu-idle") == {"cpu": 42.0, "mem": 13.37}

    def test_no_values(self, daemon, client):
        """A zero count yields an empty map, not None."""
        daemon.replies['GETVAL "h/p/t"'] = "0 Values found\n"
        assert client.get_value("h/p/t") == {}

    def test_unknown_identifier(self, client):
        """The daemon's rejection text becomes the error message."""
        with pytest.raises(ProtocolError, match="Unknown command"):
            client.get_value("nope/nope/nope")

    def test_unparseable_value(self, daemon, client):
        """A bad number is a protocol error; the map parsed so far is attached."""
        daemon.replies['GETVAL "h/p/t"'] = "2 Values found\nok=1\nbad=notanumber\n"
        with pytest.raises(ProtocolError) as exc_info:
            client.get_value("h/p/t")
        assert exc_info.value.partial == {"ok": 1.0}

    def test_repeatable(self, daemon, client):
        """The same query against unchanged state gives the same result."""
        daemon.replies['GETVAL "h/p/t"'] = "1 Value found\nvalue=3.5\n"
        assert client.get_value("h/p/t") == client.get_value("h/p/t")


class TestPutValue:
    """PUTVAL."""

    def test_command_line(self, daemon, client):
        """Options, N timestamp and values reach the daemon verbatim."""
        line = 'PUTVAL "host/plugin/type" type="gauge" N:1:U'
        daemon.replies[line] = "0 Success: 1 value has been dispatched.\n"
        client.put_value("host/plugin/type", {"type": "gauge"}, None, 1, "U")
        assert daemon.received == [line]

    def test_explicit_timestamp(self, daemon, client):
        """A timestamp is sent as epoch seconds."""
        line = 'PUTVAL "h/p/t" interval="10" 1634000000:0.25:U'
        daemon.replies[line] = "0 Success\n"
        client.put_value("h/p/t", {"interval": "10"}, datetime.fromtimestamp(1634000000, tz=UTC), 0.25, UNDEFINED)
        assert daemon.received == [line]

    def test_rejected(self, client):
        """A rejected submission is a protocol error."""
        with pytest.raises(ProtocolError):
            client.put_value("h/p/t", None, None, 1)

    def test_bad_value_not_sent(self, daemon, client):
        """Invalid values fail before anything goes on the wire."""
        with pytest.raises(TypeError):
            client.put_value("h/p/t", None, None, "oops")
        assert daemon.received == []


class TestPutNotification:
    """PUTNOTIF."""

    def test_command_line(self, daemon, client):
        """Options first, message last."""
        line = 'PUTNOTIF severity="okay" time="1634000000" message="all good"'
        daemon.replies[line] = "0 Success\n"
        client.put_notification({"severity": "okay", "time": "1634000000"}, "all good")
        assert daemon.received == [line]


class TestListValues:
    """LISTVAL."""

    def test_entries(self, daemon, client):
        """Fractions are milliseconds; a missing fraction is zero."""
        daemon.replies["LISTVAL"] = "2 Values found\n1634000000.500 myhost/cpu/0\n1634000001 myhost/cpu/1\n"
        result = client.list_values()
        assert result == {
            "myhost/cpu/0": datetime(2021, 10, 12, 0, 53, 20, 500_000, tzinfo=UTC),
            "myhost/cpu/1": datetime(2021, 10, 12, 0, 53, 21, tzinfo=UTC),
        }

    def test_empty(self, daemon, client):
        """No identifiers yield an empty map."""
        daemon.replies["LISTVAL"] = "0 Values found\n"
        assert client.list_values() == {}

    def test_repeatable(self, daemon, client):
        """Listing twice gives identical results."""
        daemon.replies["LISTVAL"] = "1 Value found\n12.345 a/b/c\n"
        assert client.list_values() == client.list_values()

    def test_bad_timestamp(self, daemon, client):
        """A malformed timestamp is a protocol error."""
        daemon.replies["LISTVAL"] = "1 Value found\nsoon a/b/c\n"
        with pytest.raises(ProtocolError, match="Could not parse timestamp"):
            client.list_values()


class TestFlush:
    """FLUSH."""

    def test_identifier_only(self, daemon, client):
        """Empty plugin list omits plugin clauses."""
        daemon.replies['FLUSH timeout=-1 identifier="a"'] = "0 Done: 1 successful, 0 errors\n"
        client.flush(-1, [], ["a"])
        assert daemon.received == ['FLUSH timeout=-1 identifier="a"']

    def test_defaults_flush_everything(self, daemon, client):
        """No arguments: no timeout, every plugin, every identifier."""
        daemon.replies["FLUSH timeout=-1"] = "0 Done\n"
        client.flush()
        assert daemon.received == ["FLUSH timeout=-1"]


class TestSendCommand:
    """Raw passthrough."""

    def test_raw_lines(self, daemon, client):
        """Reply lines are returned unparsed."""
        daemon.replies["LISTVAL"] = "1 Value found\n1.000 a/b/c\n"
        assert client.send_command("LISTVAL") == ["1.000 a/b/c"]


class TestFromStream:
    """Caller-supplied transport."""

    def test_wraps_stream(self, make_stream):
        """A client over an in-memory stream writes and parses like over a socket."""
        stream = make_stream(b"1 Value found\nvalue=2\n")
        client = CollectdClient.from_stream(stream)
        assert client.get_value("h/p/t") == {"value": 2.0}
        assert bytes(stream.written) == b'GETVAL "h/p/t"\n'
        client.close()
        assert stream.closed

    def test_daemon_gone(self, make_stream):
        """A stream that ends before the reply is a transport error."""
        client = CollectdClient.from_stream(make_stream(b""))
        with pytest.raises(TransportError):
            client.list_values()
