"""Template domain events."""

from eventcraft.domain.shared import DomainEvent


class TemplateSaved(DomainEvent):
    """Event raised when a validated template is stored."""

    template_id: str
    template_name: str
    saved_by: str
    module_count: int
    task_count: int
