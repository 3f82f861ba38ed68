"""
Built-in levels.
"""

DEFAULT_LEVEL = (
    "_N _N _N _N _N _N _N _N _N _N _N _N _N\n"
    "_N _N _N _N _N _N _N _N _N _N _N _N _N\n"
    "_N _N _N+P _N _N _N _N _N _N _N _N _N _N\n"
    "_N _N _N _N _N _N _N _N _N _N _N _N _N\n"
    "_N _N _N _N _N _N _N _N _N _N _N _N _N\n"
    "_N _N _N _N _N _N _N _N _N _N _N _N _N\n"
    "_N+W _N+W _N+W _N+W _N+W _N+W _N+W _N+W _N+W _N+W _N+W _N+W _N+W\n"
)

LEVELS = dict(
    default=DEFAULT_LEVEL,
    doors=(
        "N+W N+W N+W N+W N+W N+W\n"
        "N+W N+P N N+T(red) N N+W\n"
        "N+W N N+B N N N+W\n"
        "N+W N+W N+D(red) N+W N+W N+W\n"
        "N+W N N N+T(blue) N+S N+W\n"
        "N+W N+W N+W N+D(red&blue) N+W N+W\n"
        "X X N N+G(exit) X\n"
    ),
    glitch=(
        "N N N N N\n"
        "N+P _H _H _H N+C\n"
        "N _H+EX _H _H+EY N\n"
        "N N Nx2+W N N+G\n"
    ),
)
