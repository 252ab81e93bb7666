from curvekit.tools.point import Point

MOVE = "M"
LINE = "L"
QUAD = "Q"
CUBIC = "C"


class Path:
    """
    Append-only sequence of path commands, the sink the flattener and the arc approximations write into.

    Every command is a tuple of its type followed by its points, the last one being the end point:

        ("M", end), ("L", end), ("Q", control, end), ("C", control1, control2, end)

    The current point is the end point of the last command. The curve routines assume it already equals the start
    of the segment they are given, so a Path built for them starts with a move to that point.
    """

    def __init__(self, start=None):
        self.commands = []
        if start is not None:
            self.move_to(start[0], start[1])

    def __repr__(self):
        return f"Path({self.commands!r})"

    def __len__(self):
        return len(self.commands)

    def __iter__(self):
        return iter(self.commands)

    def __getitem__(self, item):
        return self.commands[item]

    @property
    def current(self):
        if not self.commands:
            return None
        return self.commands[-1][-1]

    def move_to(self, x, y):
        self.commands.append((MOVE, Point(x, y)))

    def line_to(self, x, y):
        self.commands.append((LINE, Point(x, y)))

    def quad_to(self, cx, cy, x, y):
        self.commands.append((QUAD, Point(cx, cy), Point(x, y)))

    def cubic_to(self, c1x, c1y, c2x, c2y, x, y):
        self.commands.append((CUBIC, Point(c1x, c1y), Point(c2x, c2y), Point(x, y)))

    def points(self):
        """End points of all commands in order."""
        return [command[-1] for command in self.commands]

    def segments(self, kind=None):
        """
        Yield (start, command) pairs, optionally only for one command type.
        """
        start = None
        for command in self.commands:
            if start is not None and (kind is None or command[0] == kind):
                yield start, command
            start = command[-1]
