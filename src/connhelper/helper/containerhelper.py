"""
Connection helpers that reach a daemon running inside a container or a kubernetes pod, by executing
the bootstrap command in it through the container engine's command line tool.

    docker-container://<container>[?context=<docker context>]
    podman-container://<container>
    nerdctl-container://<container>
    kube-pod://<pod>[?context=<kube context>&namespace=<namespace>&container=<container>]

These schemes are not registered by default. Call register_container_helpers() during start up.
"""
import logging
import re
from urllib.parse import parse_qs

from connhelper.conduit.command_conduit import new_command_conduit
from connhelper.helper.base import ConnectionHelper, ConnectionHelperFactory, HelperError
from connhelper.helper.registry import default_registry

logger = logging.getLogger(__name__)

# run inside the container; relays the daemon API over its standard input and output
container_bootstrap_command = ('buildctl', 'dial-stdio')

_dns_label = r'[a-z0-9]([-a-z0-9]*[a-z0-9])?'
pod_name_pattern = re.compile(r'^%s(\.%s)*$' % (_dns_label, _dns_label))


class InvalidContainerURLError(HelperError):
    """ The URL does not name a container or pod. """


def _query(url):
    return {k: v[-1] for k, v in parse_qs(url.query).items()}


class ContainerExecHelperFactory(ConnectionHelperFactory):
    """
    Builds helpers that run `<program> exec -i <container> <bootstrap command>`.
    """

    def __init__(self, program, supports_context=False):
        self.program = program
        self.supports_context = supports_context

    def exec_args(self, url):
        container = url.netloc
        if not container:
            raise InvalidContainerURLError("url lacks container name: %s" % url.geturl())
        query = _query(url)
        args = []
        if self.supports_context and query.get('context'):
            args.append('--context=' + query['context'])
        args += ['exec', '-i', container]
        args += container_bootstrap_command
        return args

    def __call__(self, url):
        args = self.exec_args(url)
        program = self.program

        def dial(ctx, addr):
            return new_command_conduit(ctx, program, *args)

        return ConnectionHelper(dial)


class KubePodHelperFactory(ConnectionHelperFactory):
    """
    Builds helpers that run `kubectl exec -i <pod> -- <bootstrap command>`.
    """
    program = 'kubectl'

    def exec_args(self, url):
        pod = url.netloc
        if not pod:
            raise InvalidContainerURLError("url lacks pod name: %s" % url.geturl())
        if not pod_name_pattern.match(pod):
            raise InvalidContainerURLError("invalid pod name %r in %s" % (pod, url.geturl()))
        query = _query(url)
        args = []
        if query.get('context'):
            args.append('--context=' + query['context'])
        args.append('--namespace=' + (query.get('namespace') or 'default'))
        args.append('exec')
        if query.get('container'):
            args.append('--container=' + query['container'])
        args += ['-i', pod, '--']
        args += container_bootstrap_command
        return args

    def __call__(self, url):
        args = self.exec_args(url)
        program = self.program

        def dial(ctx, addr):
            return new_command_conduit(ctx, program, *args)

        return ConnectionHelper(dial)


def register_container_helpers(registry=None):
    """
    Registers the container and pod schemes. Call before resolving any daemon URL.
    """
    if registry is None:
        registry = default_registry
    registry.register('docker-container', ContainerExecHelperFactory('docker', supports_context=True))
    registry.register('podman-container', ContainerExecHelperFactory('podman'))
    registry.register('nerdctl-container', ContainerExecHelperFactory('nerdctl'))
    registry.register('kube-pod', KubePodHelperFactory())
    logger.debug("registered container connection helpers: %s" % ', '.join(registry.schemes()))
