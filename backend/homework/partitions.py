"""The fixed (grade level, subject) table homework is filed under."""

from typing import NamedTuple

from backend.core.errors import InvalidPartition

GRADE_LEVELS = (1, 2, 3, 4)
SUBJECTS = ('mathematics', 'english', 'science', 'social_studies')


def normalize_subject(subject: str) -> str:
    return subject.strip().lower().replace('-', '_').replace(' ', '_')


class PartitionKey(NamedTuple):
    grade_level: int
    subject: str

    @classmethod
    def parse(cls, grade_level: int, subject: str) -> 'PartitionKey':
        key = cls(grade_level, normalize_subject(subject))
        if key not in PARTITIONS:
            raise InvalidPartition()
        return key

    @property
    def label(self) -> str:
        return f'grade {self.grade_level} {self.subject.replace("_", " ")}'


PARTITIONS = tuple(PartitionKey(grade, subject) for grade in GRADE_LEVELS for subject in SUBJECTS)
