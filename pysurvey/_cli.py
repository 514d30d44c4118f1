import sys

from ._main import main
from .utils import enable_udp_logging, listen_to_logs


def cli(argv=None):
    argv = sys.argv if argv is None else argv
    if "--version" in argv:
        from . import __version__

        print("pysurvey", __version__)
    elif "--listen" in argv:
        listen_to_logs()
    else:
        if "--log" in argv:
            enable_udp_logging()
        return main()
