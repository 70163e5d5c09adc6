NUM_KEYS = 16


class Keypad:
    """
    State of the 16-key hexadecimal keypad. Only the host writes it.
    """

    def __init__(self):
        self.keys = [False] * NUM_KEYS

    def set_key(self, code, pressed):
        """
        Record the state of key `code`. Returns True when this call is a
        key-down transition, i.e. the key was up and is now pressed.
        """
        if not 0 <= code < NUM_KEYS:
            raise ValueError("Invalid key code: {!r}".format(code))
        was_pressed = self.keys[code]
        self.keys[code] = bool(pressed)
        return self.keys[code] and not was_pressed

    def is_pressed(self, code):
        return self.keys[code & 0x0F]
