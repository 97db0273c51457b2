"""Global enums — must match DB CHECK constraints exactly."""

from enum import Enum


class TransactionType(str, Enum):
    TOPUP = "topup"
    WITHDRAW = "withdraw"
    SEND = "send"
    RECEIVE = "receive"


class TransactionStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class LockBackend(str, Enum):
    LOCAL = "local"
    REDIS = "redis"
