WIDTH = 64
HEIGHT = 32


class Framebuffer:
    """
    The 64 x 32 monochrome display. Pixels are stored row by row in a flat
    list, so pixel (x, y) lives at index y * WIDTH + x.

    The engine is the only writer. The host renderer reads it and clears
    `dirty` once it has painted the current contents.
    """

    def __init__(self):
        self.pixels = [False] * (WIDTH * HEIGHT)
        self.dirty = False

    def clear(self):
        self.pixels = [False] * (WIDTH * HEIGHT)
        self.dirty = True

    def is_lit(self, x, y):
        return self.pixels[(y % HEIGHT) * WIDTH + (x % WIDTH)]

    def plot(self, x, y):
        """
        XOR a lit pixel onto (x, y), wrapping both coordinates around the
        screen. Returns True when the pixel was lit and is now turned off.
        """
        index = (y % HEIGHT) * WIDTH + (x % WIDTH)
        collision = self.pixels[index]
        self.pixels[index] = not collision
        self.dirty = True
        return collision

    def rows(self):
        pixels = self.pixels
        for y in range(HEIGHT):
            row_base = y * WIDTH
            yield pixels[row_base:row_base + WIDTH]

    def lit_count(self):
        """Number of lit pixels, a quick way to compare whole screens."""
        return sum(self.pixels)

    def __str__(self):
        return "\n".join(
            "".join("X" if pixel else "_" for pixel in row) for row in self.rows()
        )
