import logging
import subprocess
import sys
import threading

from connhelper.conduit.base import DefaultConduit, ConduitError, ConduitClosedError
from connhelper.config.config import configure_module
from connhelper.support.context import background

logger = logging.getLogger(__name__)

# seconds to wait for the process to exit once its input is closed, before it is killed
close_grace_period = 10.0

# the number of trailing stderr bytes kept for error reports
stderr_limit = 65536

# seconds to wait for the stderr reader to finish after the process has gone
stderr_join_timeout = 1.0

# seconds to wait for a stream to close while another thread is blocked on it
stream_close_timeout = 1.0


class StderrCapture:
    """
    Drains a process error stream on a background thread so the process never blocks writing to it.
    Only the most recent bytes are retained.
    """

    def __init__(self, stream, limit, name='stderr'):
        self._stream = stream
        self._limit = limit
        self._data = bytearray()
        self._lock = threading.Lock()
        self._thread = threading.Thread(target=self._drain, name=name, daemon=True)
        self._thread.start()

    def _drain(self):
        try:
            while True:
                chunk = self._stream.read1(4096)
                if not chunk:
                    break
                self._append(chunk)
        except (OSError, ValueError) as e:
            logger.debug("stopped reading stderr: %s" % e)
        finally:
            self._stream.close()

    def _append(self, chunk):
        with self._lock:
            self._data += chunk
            if len(self._data) > self._limit:
                del self._data[:len(self._data) - self._limit]

    @property
    def value(self) -> bytes:
        with self._lock:
            return bytes(self._data)

    def join(self, timeout=None):
        self._thread.join(timeout)


class CommandConduit(DefaultConduit):
    """
    A conduit to a local process: writes go to the process standard input and reads come from
    its standard output. Standard error is captured separately and reported in errors.

    Closing the conduit closes the process input, gives the process close_grace_period seconds
    to exit and then kills it.
    """

    def __init__(self, program, *args, cwd=None, env=None):
        """
        :param program: the executable to run
        :param args: the arguments passed to the executable
        raises ConduitError when the process cannot be started
        """
        super().__init__()
        self.args = (program,) + tuple(args)
        self.process = None
        self._stderr = None
        self._read_closed = False
        self._write_closed = False
        self._closed = False
        self._lock = threading.Lock()
        self._load(cwd, env)

    def _load(self, cwd, env):
        try:
            p = subprocess.Popen(self.args, cwd=cwd, env=env,
                                 stdin=subprocess.PIPE, stdout=subprocess.PIPE, stderr=subprocess.PIPE)
        except (OSError, ValueError) as e:
            logger.error("unable to start %s: %s" % (self.args[0], e))
            raise ConduitError("unable to start %s: %s" % (self.args[0], e)) from e
        self.process = p
        self.set_streams(p.stdout, p.stdin)
        self._stderr = StderrCapture(p.stderr, stderr_limit, name='stderr-%d' % p.pid)
        logger.info("started %s (pid %d)" % (self.args[0], p.pid))
        logger.debug("command line: %s" % ' '.join(self.args))

    @property
    def target(self):
        return self.process

    @property
    def open(self):
        """
        The conduit is open until it is closed, or the underlying process exits.
        """
        return not self._closed and self.process.poll() is None

    def stderr_output(self) -> str:
        """ the captured tail of the process standard error. """
        return self._stderr.value.decode(errors='replace')

    def read(self, size=-1) -> bytes:
        """
        Reads at most size bytes, blocking until at least one byte is available.
        Returns b'' once the process has closed its output.
        """
        if self._read_closed:
            raise ConduitClosedError(self._describe_closed())
        try:
            return self._read.read1(size)
        except ValueError as e:
            raise ConduitClosedError(self._describe_closed()) from e

    def write(self, data) -> int:
        if self._write_closed:
            raise ConduitClosedError(self._describe_closed())
        try:
            self._write.write(data)
            self._write.flush()
        except (BrokenPipeError, ValueError) as e:
            raise ConduitClosedError(self._describe_closed()) from e
        return len(data)

    def flush(self):
        try:
            self._write.flush()
        except (BrokenPipeError, ValueError) as e:
            raise ConduitClosedError(self._describe_closed()) from e

    def close_write(self):
        """ Closes the process input. The process sees end of file. """
        if not self._write_closed:
            self._write_closed = True
            self._close_stream_bounded(self._write).join(stream_close_timeout)
            self._kill_if_unused()

    def close_read(self):
        """ Closes the process output. """
        if not self._read_closed:
            self._read_closed = True
            self._close_stream_bounded(self._read).join(stream_close_timeout)
            self._kill_if_unused()

    def close(self):
        """
        Closes the process input and waits up to close_grace_period seconds for the process to exit,
        then kills it. Returns within the grace period even when another thread is blocked on a stream.
        """
        with self._lock:
            if self._closed:
                return
            self._closed = True
        self._write_closed = True
        closing = self._close_stream_bounded(self._write)
        try:
            self.process.wait(close_grace_period)
        except subprocess.TimeoutExpired:
            logger.warning("%s (pid %d) did not exit within %s seconds, killing it" %
                           (self.args[0], self.process.pid, close_grace_period))
            self.kill()
        closing.join(stream_close_timeout)
        self._read_closed = True
        self._close_stream_bounded(self._read).join(stream_close_timeout)
        self._stderr.join(stderr_join_timeout)
        logger.debug("closed %s (pid %d), exit status %s" % (self.args[0], self.process.pid, self.process.returncode))

    def kill(self):
        """
        Kills the process immediately and waits for it to exit.
        """
        if self.process.poll() is None:
            self.process.kill()
        self.process.wait()

    def abort(self):
        """ Kills the process and releases the streams without waiting for a graceful exit. """
        with self._lock:
            self._closed = True
        self.kill()
        self._read_closed = self._write_closed = True
        self._close_stream_bounded(self._write).join(stream_close_timeout)
        self._close_stream_bounded(self._read).join(stream_close_timeout)
        self._stderr.join(stderr_join_timeout)

    def _kill_if_unused(self):
        if self._read_closed and self._write_closed and self.process.poll() is None:
            logger.debug("both streams to %s (pid %d) are closed, killing it" % (self.args[0], self.process.pid))
            self.kill()

    def _close_stream_bounded(self, stream):
        """
        Closes the stream on a helper thread and returns the thread.
        Closing a buffered stream blocks while another thread is blocked reading or writing it;
        that thread is released once the process exits.
        """
        closer = threading.Thread(target=self._close_stream, args=(stream,),
                                  name='close-%d' % self.process.pid, daemon=True)
        closer.start()
        return closer

    @staticmethod
    def _close_stream(stream):
        try:
            stream.close()
        except OSError as e:
            # the process may have exited with unwritten input still buffered
            logger.debug("error closing stream: %s" % e)

    def _describe_closed(self):
        status = self.process.poll()
        if status is None:
            return "conduit to %s is closed" % self.args[0]
        stderr = self.stderr_output().strip()
        message = "%s exited with status %s" % (self.args[0], status)
        return message + ": " + stderr if stderr else message


def new_command_conduit(ctx, program, *args, cwd=None, env=None) -> CommandConduit:
    """
    Starts a process and returns a conduit to its standard input and output.

    The context only governs starting the process. When it is done before the process has
    been started, the process is killed and the context error is raised.
    Cancelling the context later has no effect on the returned conduit.
    :param ctx: the Context governing the start of the process. None means no cancellation.
    :param program: the executable to run
    :param args: the process arguments
    """
    ctx = ctx or background()
    ctx.raise_if_done()
    conduit = CommandConduit(program, *args, cwd=cwd, env=env)
    error = ctx.error
    if error is not None:
        logger.debug("%s while starting %s, killing pid %d" % (error, program, conduit.process.pid))
        conduit.abort()
        raise error
    return conduit


configure_module(sys.modules[__name__])
