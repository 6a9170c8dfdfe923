"""
SaddleUp - AI horse-training assistant core.

Modules:
- context: Rider/horse/facility aggregation and prompt composition
- chat: Chat orchestration and video timestamp extraction
- plans: Training-plan generation with a static fallback curriculum
"""

__version__ = "1.0.0"
