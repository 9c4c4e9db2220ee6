import unittest
from unittest.mock import patch

from hamcrest import assert_that, is_, calling, raises, instance_of, contains_string

from connhelper.helper.base import InvalidSSHHostError, nominal_host
from connhelper.helper.sshhelper import build_ssh_helper, ssh_command_args, bootstrap_command
from connhelper.ssh.spec import SSHSpec, InvalidSSHURLError
from connhelper.support.context import with_cancel


class SSHCommandArgsTest(unittest.TestCase):
    def test_flags_then_login_then_bootstrap(self):
        args = ssh_command_args(SSHSpec('host', 'user', '2222'), ['-o', 'ConnectTimeout=30'])
        assert_that(args, is_(['-o', 'ConnectTimeout=30', '-l', 'user', '-p', '2222', '--', 'host',
                               'docker', 'system', 'dial-stdio']))

    def test_bootstrap_command(self):
        assert_that(bootstrap_command, is_(('docker', 'system', 'dial-stdio')))


class BuildSSHHelperTest(unittest.TestCase):
    def test_helper_uses_nominal_host(self):
        assert_that(build_ssh_helper('ssh://alice@build.internal/').host, is_(nominal_host))

    def test_dial_spawns_ssh(self):
        ctx = with_cancel()
        helper = build_ssh_helper('ssh://user@host:2222/', ['-v', '-i', 'key'])
        with patch('connhelper.helper.sshhelper.new_command_conduit') as spawn:
            spawn.return_value = 'conduit'
            assert_that(helper.dialer(ctx, 'ignored:80'), is_('conduit'))
            spawn.assert_called_once_with(ctx, 'ssh', '-v', '-i', 'key', '-l', 'user', '-p', '2222', '--', 'host',
                                          'docker', 'system', 'dial-stdio')

    def test_dial_without_flags(self):
        helper = build_ssh_helper('ssh://alice@build.internal/')
        with patch('connhelper.helper.sshhelper.new_command_conduit') as spawn:
            helper.dial()
            args = spawn.call_args[0][1:]
            assert_that(args, is_(('ssh', '-l', 'alice', '--', 'build.internal', 'docker', 'system', 'dial-stdio')))

    def test_each_dial_spawns_a_new_process(self):
        helper = build_ssh_helper('ssh://host')
        with patch('connhelper.helper.sshhelper.new_command_conduit') as spawn:
            spawn.side_effect = [OSError("first fails"), 'second']
            assert_that(calling(helper.dial), raises(OSError))
            assert_that(helper.dial(), is_('second'))
            assert_that(spawn.call_count, is_(2))

    def test_flags_are_copied(self):
        flags = ['-v']
        helper = build_ssh_helper('ssh://host', flags)
        flags.append('-q')
        with patch('connhelper.helper.sshhelper.new_command_conduit') as spawn:
            helper.dial()
            assert_that(spawn.call_args[0][1:3], is_(('ssh', '-v')))
            assert_that(spawn.call_args[0][3], is_('--'))

    def test_missing_host(self):
        assert_that(calling(build_ssh_helper).with_args('ssh://'),
                    raises(InvalidSSHHostError, "ssh host connection is not valid: invalid SSH URL 'ssh://'"))

    def test_error_keeps_cause(self):
        try:
            build_ssh_helper('ssh://user@')
            self.fail("expected InvalidSSHHostError")
        except InvalidSSHHostError as e:
            assert_that(e.__cause__, instance_of(InvalidSSHURLError))
            assert_that(str(e), contains_string('hostname is empty'))


if __name__ == '__main__':  # pragma no cover
    unittest.main()
