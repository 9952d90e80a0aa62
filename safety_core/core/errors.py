"""
Error types for the safety-core domain.
"""

class InvalidArgumentError(ValueError):
    """좌표 범위 초과, 비유한 수 등 잘못된 입력"""
