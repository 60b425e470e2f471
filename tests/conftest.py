import pytest

from utils.commit_parser import CommitParser


@pytest.fixture
def parser():
    return CommitParser()
