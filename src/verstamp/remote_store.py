from abc import ABC, abstractmethod


class RemoteFileStore(ABC):
    """
    A file store addressed by branch and path, scoped to one repository.

    Implementations raise RemoteIOError for any failure talking to the remote.
    """

    @abstractmethod
    def file_exists(self, branch: str, path: str) -> bool:
        ...

    @abstractmethod
    def get_file_content(self, branch: str, path: str) -> str:
        """Returns the file text; raises RemoteIOError if the file is gone."""

    @abstractmethod
    def update_file(self, branch: str, path: str, new_content: str, commit_message: str) -> None:
        """Commits new_content to the file on the given branch."""
