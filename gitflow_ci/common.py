import os


class Error(object):
    exit_code = os.EX_SOFTWARE
    message = None
    reason = None

    def __init__(self, exit_code, message, reason):
        self.exit_code = exit_code
        self.message = message
        self.reason = reason

    def __repr__(self):
        return '\n'.join(filter(None, [self.message, self.reason]))


class GitFlowException(Exception):
    result = None

    def __init__(self, result):
        super().__init__(result)
        self.result = result

    def __str__(self):
        return '\n'.join(repr(error) for error in self.result.errors)


class Result(object):
    errors = None

    def __init__(self):
        self.errors = list()

    def warn(self, message, reason):
        self.errors.append(Error(os.EX_OK, message, reason))

    def error(self, exit_code, message, reason, throw: bool = False):
        self.errors.append(Error(exit_code, message, reason))
        if throw:
            self.abort()

    def fail(self, exit_code, message, reason):
        self.error(exit_code, message, reason, True)

    def has_errors(self):
        for error in self.errors:
            if error.exit_code != os.EX_OK:
                return True
        return False

    def abort(self):
        raise GitFlowException(self)
