"""管線例外定義.

致命錯誤一律往上拋給呼叫端；只有單一產物的產生失敗會在 generator 內部被收斂。
"""


class Figma2CodeError(Exception):
    """所有 figma2code 例外的基底類別."""


class MalformedDocumentError(Figma2CodeError):
    """設計文件結構不合法（缺少 document / document.children）."""


class UninitializedStateError(Figma2CodeError):
    """前一階段尚未執行就呼叫下一階段."""


class InvalidLibraryFormatError(Figma2CodeError):
    """目標元件庫 JSON 缺少 components 陣列."""


class LibraryNotLoadedError(Figma2CodeError):
    """尚未載入目標元件庫就進行 mapping."""


class NoComponentsError(Figma2CodeError):
    """沒有任何來源元件可供 mapping."""


class NoMappingsSelectedError(Figma2CodeError):
    """選取的 mapping id 全部無法對應."""


class UnsupportedFrameworkError(Figma2CodeError, ValueError):
    """不支援的目標框架."""


class SourceLoadError(Figma2CodeError):
    """讀取設計檔或元件庫來源（檔案 / URL）失敗."""

    def __init__(self, message: str, status_code=None):
        super().__init__(message)
        self.status_code = status_code
