"""
Errores del dominio de comisiones
Cada error se traduce a un mensaje corto para mostrar al usuario
"""


class CommissionError(Exception):
    """Base de todos los errores de negocio"""

    code = "commission_error"
    status_code = 400
    default_message = "Error procesando la operación"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self):
        return {"error": self.message, "code": self.code}


class InvalidFormat(CommissionError):
    code = "invalid_format"
    default_message = "Formato de NCF inválido"


class DuplicateNcf(CommissionError):
    code = "duplicate_ncf"
    status_code = 409
    default_message = "Ya existe una factura con este NCF"

    def __init__(self, ncf=None, message=None):
        self.ncf = ncf
        super().__init__(message or (f"Ya existe una factura con el NCF {ncf}" if ncf else None))


class AmountMismatch(CommissionError):
    code = "amount_mismatch"
    default_message = "Los productos especiales superan el total de la factura"

    def __init__(self, total_amount=None, special_total=None, message=None):
        self.total_amount = total_amount
        self.special_total = special_total
        if message is None and total_amount is not None and special_total is not None:
            message = (
                f"Los productos especiales ({special_total:,.2f}) "
                f"superan el total de la factura ({total_amount:,.2f})"
            )
        super().__init__(message)


class InvalidPercentage(CommissionError):
    code = "invalid_percentage"
    default_message = "El porcentaje debe estar entre 0 y 100"


class NotDeletable(CommissionError):
    code = "not_deletable"
    default_message = "Este registro no se puede eliminar"


class StorageFailure(CommissionError):
    code = "storage_failure"
    status_code = 500
    default_message = "Error de almacenamiento"

    def __init__(self, collection=None, message=None):
        self.collection = collection
        if message is None and collection:
            message = f"Error de almacenamiento en {collection}"
        super().__init__(message)

    def to_dict(self):
        data = super().to_dict()
        data["collection"] = self.collection
        return data


class PartialBatchFailure(CommissionError):
    code = "partial_batch_failure"
    status_code = 207
    default_message = "Algunas facturas no se pudieron actualizar"

    def __init__(self, success_count, total_count, message=None):
        self.success_count = success_count
        self.total_count = total_count
        super().__init__(message or f"Se actualizaron {success_count} de {total_count} facturas")

    def to_dict(self):
        data = super().to_dict()
        data["success_count"] = self.success_count
        data["total_count"] = self.total_count
        return data
