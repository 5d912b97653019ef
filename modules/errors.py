"""
エラー定義
Error taxonomy for the interpreter session.
Every error carries the message shown in the interpretation panel.
"""


class InterpreterError(Exception):
    """基底クラス。message は画面表示用、detail は元の原因"""

    default_message = "Something went wrong. Please try again."

    def __init__(self, detail: str = ""):
        self.detail = detail
        super().__init__(self.message)

    @property
    def message(self) -> str:
        return self.default_message


class DeviceAccessError(InterpreterError):
    default_message = (
        "Error: Unable to access camera. "
        "Please check your permissions and try again."
    )


class EmptyBatchError(InterpreterError):
    default_message = (
        "No frames were captured. "
        "Record for at least a moment before stopping."
    )


class ServiceError(InterpreterError):
    """解釈サービスが返した構造化エラー"""

    @property
    def message(self) -> str:
        return f"Error processing sign language: {self.detail}. Please try again."


class UnexpectedError(InterpreterError):
    @property
    def message(self) -> str:
        return f"Unexpected error: {self.detail}. Please try again."
