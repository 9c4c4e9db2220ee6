from connhelper.conduit.command_conduit import new_command_conduit
from connhelper.helper.base import ConnectionHelper


def get_command_connection_helper(program, *args) -> ConnectionHelper:
    """
    Builds a helper whose dialer runs the given local command and talks to it over standard input and output.
    """
    def dial(ctx, addr):
        return new_command_conduit(ctx, program, *args)

    return ConnectionHelper(dial)
