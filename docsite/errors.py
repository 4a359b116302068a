# docsite/errors.py

class DocsiteError(RuntimeError):
    """Base for failures a CLI run reports and exits 1 on."""

class RemoteError(DocsiteError):
    def __init__(self, message: str, kind: str = "generic", hint: str = ""):
        self.kind = kind
        self.hint = hint
        super().__init__(f"{message}\n  {hint}" if hint else message)

class ContentError(DocsiteError):
    pass

class UnknownProductError(DocsiteError):
    pass
