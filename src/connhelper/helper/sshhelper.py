import logging

from connhelper.conduit.command_conduit import new_command_conduit
from connhelper.helper.base import ConnectionHelper, InvalidSSHHostError
from connhelper.ssh.spec import parse_url, InvalidSSHURLError

logger = logging.getLogger(__name__)

ssh_program = 'ssh'

# run on the remote host; relays the daemon API over its standard input and output
bootstrap_command = ('docker', 'system', 'dial-stdio')


def ssh_command_args(spec, ssh_flags=()):
    """
    The ssh arguments for one dial: the extra flags, the login arguments and the bootstrap command.
    """
    return list(ssh_flags) + spec.args(*bootstrap_command)


def build_ssh_helper(daemon_url, ssh_flags=None) -> ConnectionHelper:
    """
    Builds a helper that reaches the daemon by running the bootstrap command on the host over ssh.
    :param daemon_url: an ssh URL, e.g. ssh://user@host:2222
    :param ssh_flags: extra ssh options placed before the login arguments
    :raises InvalidSSHHostError: when the URL does not name a usable ssh host
    """
    try:
        spec = parse_url(daemon_url)
    except InvalidSSHURLError as e:
        raise InvalidSSHHostError("ssh host connection is not valid: %s" % e) from e

    args = ssh_command_args(spec, ssh_flags or ())
    logger.debug("ssh helper for %s: %s %s" % (spec.host, ssh_program, ' '.join(args)))

    def dial(ctx, addr):
        return new_command_conduit(ctx, ssh_program, *args)

    return ConnectionHelper(dial)
