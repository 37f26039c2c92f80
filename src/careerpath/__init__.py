"""Career-path trivia engine: guess the NFL player from the teams they played for."""

__version__ = "0.1.0"
