class EngineFault(Exception):
    """
    Base class for every fault the engine raises while running a program.
    """


class DecodeError(EngineFault):
    """
    Raised when a 16-bit word does not match any assigned op-code.
    """

    def __init__(self, word, pc=None):
        self.word = word
        self.pc = pc
        message = "Unknown op-code: {:#06x}".format(word)
        if pc is not None:
            message += " at {:#06x}".format(pc)
        EngineFault.__init__(self, message)


class StackOverflow(EngineFault):
    """
    Raised when CALL is executed with every stack slot already in use.
    """

    def __init__(self, pc, address):
        self.pc = pc
        self.address = address
        EngineFault.__init__(
            self,
            "Stack overflow calling {:#05x} from {:#06x}".format(address, pc),
        )
