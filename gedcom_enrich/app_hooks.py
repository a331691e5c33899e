from typing import Protocol


class AppHooks(Protocol):
    """
    Protocol for application hooks to follow long-running processing.

    Implemented by the host application to show progress of enrichment,
    statistics collection and anonymization, and to request a stop.

    Methods:
        report_step(info, target, reset_counter, plus_step) -> None:
            Report progress.
        stop_requested() -> bool:
            Whether the user asked processing to stop.
    """
    def report_step(self, info: str = None, target: int = None, reset_counter: bool = False, plus_step: int = 1) -> None:
        """
        Report progress of the current step.

        Args:
            info (str): Progress message.
            target (int): Target count for the progress counter.
            reset_counter (bool): Whether to reset the counter.
            plus_step (int): Amount to advance the counter by.
        """
        pass

    def stop_requested(self) -> bool:
        """
        Check if a stop has been requested by the user.

        Returns:
            bool: True if stop is requested, False otherwise.
        """
        return False

