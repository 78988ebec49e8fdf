from .base import BaseAgent, CategoryAgent
from .school_agent import SchoolAgent
from .program_agent import ProgramAgent
from .master_agent import MasterAgent

__all__ = [
    "BaseAgent",
    "CategoryAgent",
    "SchoolAgent",
    "ProgramAgent",
    "MasterAgent",
]
