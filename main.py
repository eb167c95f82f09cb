from bstools import *

__prog__ = "bs"

# Host hooks read by the renderers (see bstools.faults / Tool._lister).
__styles__ = {
    "directory-name": "bold #36C5F0",
}

__docs__ = {
    FaultCode.AMBIGUOUS_COMMAND: "every command path must exist under one runner only",
}


if __name__ == '__main__':
    main()
