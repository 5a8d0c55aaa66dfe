from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class Toast:
    title: str
    description: str = ''
    variant: str = 'default'

    def to_dict(self) -> dict:
        return asdict(self)


def destructive(title: str, description: str = '') -> Toast:
    return Toast(title, description, 'destructive')


class ToastSubject:
    def __init__(self):
        # Everyone who wants to hear about user-visible messages
        self.observers = []

    def attach(self, obs):
        self.observers.append(obs)

    def notify(self, toast: Toast):
        # Hand the toast to every observer
        for o in self.observers:
            o.update(toast)


class ToastCollector:
    """Observer that keeps the toasts raised while handling one request."""

    def __init__(self):
        self.toasts = []

    def update(self, toast: Toast):
        self.toasts.append(toast)

    def to_list(self):
        return [t.to_dict() for t in self.toasts]


class ToastLogger:
    # Mirrors user-visible messages into the structured log
    def __init__(self, logger):
        self.logger = logger

    def update(self, toast: Toast):
        level = self.logger.warning if toast.variant == 'destructive' else self.logger.info
        level('toast', title=toast.title, description=toast.description)
