import logging
from contextlib import contextmanager

logger = logging.getLogger("equiv_rw")
_verbose = False

def set_verbose(verbose = True):
    global _verbose
    _verbose = verbose
def is_verbose():
    return _verbose

@contextmanager
def verbosity(verbose = True):
    global _verbose
    verbose_ori = _verbose
    _verbose = verbose_ori or verbose
    try:
        yield
    finally:
        _verbose = verbose_ori

def simple_log(*args):
    if not _verbose: return
    logger.info(' '.join(str(arg) for arg in args))
