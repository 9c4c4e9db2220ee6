import unittest
from unittest.mock import patch
from urllib.parse import urlparse

from hamcrest import assert_that, is_, calling, raises, has_item

from connhelper.helper.base import nominal_host
from connhelper.helper.commandhelper import get_command_connection_helper
from connhelper.helper.containerhelper import ContainerExecHelperFactory, KubePodHelperFactory, \
    InvalidContainerURLError, register_container_helpers
from connhelper.helper.registry import HelperRegistry
from connhelper.support.context import with_cancel


class CommandHelperTest(unittest.TestCase):
    def test_dial_runs_command(self):
        ctx = with_cancel()
        helper = get_command_connection_helper('socat', '-', 'UNIX:/run/daemon.sock')
        assert_that(helper.host, is_(nominal_host))
        with patch('connhelper.helper.commandhelper.new_command_conduit') as spawn:
            helper.dial(ctx)
            spawn.assert_called_once_with(ctx, 'socat', '-', 'UNIX:/run/daemon.sock')


class ContainerExecHelperFactoryTest(unittest.TestCase):
    def test_docker_exec_args(self):
        sut = ContainerExecHelperFactory('docker', supports_context=True)
        assert_that(sut.exec_args(urlparse('docker-container://MyBuilder')),
                    is_(['exec', '-i', 'MyBuilder', 'buildctl', 'dial-stdio']))

    def test_docker_context(self):
        sut = ContainerExecHelperFactory('docker', supports_context=True)
        assert_that(sut.exec_args(urlparse('docker-container://builder?context=remote')),
                    is_(['--context=remote', 'exec', '-i', 'builder', 'buildctl', 'dial-stdio']))

    def test_context_ignored_when_unsupported(self):
        sut = ContainerExecHelperFactory('podman')
        assert_that(sut.exec_args(urlparse('podman-container://builder?context=remote')),
                    is_(['exec', '-i', 'builder', 'buildctl', 'dial-stdio']))

    def test_missing_container(self):
        sut = ContainerExecHelperFactory('docker')
        assert_that(calling(sut).with_args(urlparse('docker-container://')),
                    raises(InvalidContainerURLError, 'lacks container name'))

    def test_dial(self):
        helper = ContainerExecHelperFactory('nerdctl')(urlparse('nerdctl-container://builder'))
        with patch('connhelper.helper.containerhelper.new_command_conduit') as spawn:
            helper.dial()
            assert_that(spawn.call_args[0][1:], is_(('nerdctl', 'exec', '-i', 'builder', 'buildctl', 'dial-stdio')))


class KubePodHelperFactoryTest(unittest.TestCase):
    def test_default_namespace(self):
        sut = KubePodHelperFactory()
        assert_that(sut.exec_args(urlparse('kube-pod://buildkitd-0')),
                    is_(['--namespace=default', 'exec', '-i', 'buildkitd-0', '--', 'buildctl', 'dial-stdio']))

    def test_all_options(self):
        sut = KubePodHelperFactory()
        url = urlparse('kube-pod://buildkitd-0?context=prod&namespace=ci&container=daemon')
        assert_that(sut.exec_args(url),
                    is_(['--context=prod', '--namespace=ci', 'exec', '--container=daemon', '-i', 'buildkitd-0',
                         '--', 'buildctl', 'dial-stdio']))

    def test_invalid_pod_name(self):
        sut = KubePodHelperFactory()
        assert_that(calling(sut).with_args(urlparse('kube-pod://Bad_Pod')),
                    raises(InvalidContainerURLError, 'invalid pod name'))

    def test_dial(self):
        helper = KubePodHelperFactory()(urlparse('kube-pod://pod'))
        with patch('connhelper.helper.containerhelper.new_command_conduit') as spawn:
            helper.dial()
            assert_that(spawn.call_args[0][1], is_('kubectl'))


class RegisterContainerHelpersTest(unittest.TestCase):
    def test_registers_schemes(self):
        registry = HelperRegistry()
        register_container_helpers(registry)
        assert_that(registry.schemes(),
                    is_(['docker-container', 'kube-pod', 'nerdctl-container', 'podman-container']))

    def test_default_registry(self):
        with patch('connhelper.helper.containerhelper.default_registry', HelperRegistry()) as default:
            register_container_helpers()
            assert_that(default.schemes(), has_item('kube-pod'))


if __name__ == '__main__':  # pragma no cover
    unittest.main()
