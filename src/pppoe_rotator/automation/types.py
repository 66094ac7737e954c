class AutomationError(Exception):
    """A browser flow could not complete."""
    pass


class UsageParseError(AutomationError):
    """The usage portal showed a value that is not a minute count."""
    pass
