"""
Error taxonomy for cashier and ledger operations.

Validation errors are raised before any I/O and carry a message meant for the
operator. Store and persistence errors carry a generic retry message; the
underlying cause is chained on the exception and logged where it is raised.
"""

RETRY_MESSAGE = "Gagal memproses data. Silakan coba lagi."


class BankSampahError(Exception):
    code = "error"

    def __init__(self, message: str, status_code: int = 400):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


# ------------------------------------------------------------
# Validation (caught before any I/O)
# ------------------------------------------------------------

class ValidationError(BankSampahError):
    code = "validation_error"

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message, status_code)


class NoMemberSelected(ValidationError):
    code = "no_member_selected"

    def __init__(self, message: str = "Silakan pilih nasabah terlebih dahulu"):
        super().__init__(message)


class InvalidAmount(ValidationError):
    code = "invalid_amount"

    def __init__(self, message: str = "Jumlah penarikan harus berupa angka positif"):
        super().__init__(message)


class InvalidWeight(ValidationError):
    code = "invalid_weight"

    def __init__(self, message: str = "Berat harus lebih dari 0 kg"):
        super().__init__(message)


class InsufficientBalance(ValidationError):
    code = "insufficient_balance"

    def __init__(self, message: str = "Jumlah penarikan melebihi saldo yang tersedia"):
        super().__init__(message)


class EmptyTransaction(ValidationError):
    code = "empty_transaction"

    def __init__(self, message: str = "Transaksi belum memiliki item sampah"):
        super().__init__(message)


class DuplicateMemberCode(ValidationError):
    code = "duplicate_member_code"

    def __init__(self, member_code: str):
        super().__init__(f"ID Nasabah {member_code} sudah terdaftar", 409)


# ------------------------------------------------------------
# Operator access
# ------------------------------------------------------------

class NotAuthenticated(BankSampahError):
    code = "not_authenticated"

    def __init__(self, message: str = "Silakan login terlebih dahulu"):
        super().__init__(message, 401)


class AccessDenied(BankSampahError):
    """Authenticated, but not a registered operator (no admins row)."""

    code = "access_denied"

    def __init__(self, message: str = "Akses tidak diizinkan"):
        super().__init__(message, 403)


# ------------------------------------------------------------
# Lookup / storage
# ------------------------------------------------------------

class MemberNotFound(BankSampahError):
    """Raised when a write targets a member that no longer exists."""

    code = "member_not_found"

    def __init__(self, message: str = "ID Nasabah tidak terdaftar dalam sistem"):
        super().__init__(message, 404)


class StoreUnavailable(BankSampahError):
    code = "store_unavailable"

    def __init__(self, message: str = RETRY_MESSAGE):
        super().__init__(message, 503)


class PersistenceError(BankSampahError):
    code = "persistence_error"

    def __init__(self, message: str = RETRY_MESSAGE):
        super().__init__(message, 500)
