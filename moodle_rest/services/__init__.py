from .rest_client import MoodleRestClient  # noqa: F401
