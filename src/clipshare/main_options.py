"""Click parameter types for clipshare options."""
import click

from clipshare.config import normalize_remote, parse_listen


class ListenAddress(click.ParamType):
    """An [addr][:port] listen address, validated but passed through as text."""

    name = "[addr][:port]"

    def convert(self, value, param, ctx):
        """Fail with a usage error if value is not a valid listen address."""
        try:
            parse_listen(value)
        except ValueError as e:
            self.fail(str(e), param, ctx)
        return value


class PeerURL(click.ParamType):
    """URL of the remote peer, normalized to https."""

    name = "url"

    def convert(self, value, param, ctx):
        """Return the https URL, failing for plain http or a missing host."""
        try:
            return normalize_remote(value)
        except ValueError as e:
            self.fail(str(e), param, ctx)


LISTEN_ADDRESS = ListenAddress()
PEER_URL = PeerURL()
