"""Client for collectd's unixsock plugin: line framing, typed commands, error taxonomy."""

from mb_collectd.unixsock.client import CollectdClient as CollectdClient
from mb_collectd.unixsock.connection import Connection as Connection
from mb_collectd.unixsock.connection import Transport as Transport
from mb_collectd.unixsock.errors import CollectdError as CollectdError
from mb_collectd.unixsock.errors import ProtocolError as ProtocolError
from mb_collectd.unixsock.errors import TransportError as TransportError
from mb_collectd.unixsock.protocol import UNDEFINED as UNDEFINED
from mb_collectd.unixsock.protocol import Undefined as Undefined
from mb_collectd.unixsock.protocol import Value as Value
