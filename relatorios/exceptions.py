# exceptions.py


class RelatorioPDFError(Exception):
    """Erro fatal de geração: nenhum byte parcial é devolvido."""


class FontResourceError(RelatorioPDFError):
    """Par de fontes (regular + bold) ausente ou inválido."""


class IntegrityViolationError(RelatorioPDFError):
    """Item ou foto que não pertence ao relatório sendo renderizado."""

    def __init__(self, message, report_id=None, item_ids=None, photo_ids=None):
        super().__init__(message)
        self.report_id = report_id
        self.item_ids = list(item_ids or [])
        self.photo_ids = list(photo_ids or [])


class AssemblerStateError(RelatorioPDFError):
    """Transição inválida do montador (instância reutilizada)."""
