from enum import IntEnum


DEFAULT_HEADER_NAME = "Authorization"
DEFAULT_ALGORITHM = "HS256"
BEARER_SCHEME = "bearer"

# Only shared-secret algorithms can be verified with a signing key string.
HMAC_ALGORITHMS = frozenset({"HS256", "HS384", "HS512"})

# Operation / resource codes are stored in unsigned 8-bit columns.
OPERATION_CODE_MAX = 255


class OperationType(IntEnum):
    ADD = 0
    UPDATE = 1
    DELETE = 2
    LOGIN = 3
    LOGOUT = 4
    SCALE = 5
    ROLLBACK = 6
    BUILD = 7
    RESTART = 8

    @property
    def label(self) -> str:
        return self.name.lower()


class OperationResource(IntEnum):
    RULE = 0
    BUSINESS = 1
    INFRA = 2
    RECEIVER = 3
    USER = 4
    GROUP = 5
    ROUTE = 6
    PROMETHEUS = 7
    APP = 8
    SERVICE = 9
    CRON_JOB = 10
    CONFIG_MAP = 11
    CLUSTER = 12
    NAMESPACE = 13
    HPA = 14
    NODE = 15
    CANARY = 16
    TEMPLATE = 17
    APPLICATION = 18
    STEP = 19

    @property
    def label(self) -> str:
        return _RESOURCE_LABELS.get(self, self.name.lower().replace("_", " "))


_RESOURCE_LABELS = {
    OperationResource.RULE: "alert rule",
    OperationResource.BUSINESS: "business monitoring",
    OperationResource.INFRA: "infrastructure monitoring",
    OperationResource.RECEIVER: "alert receiver",
    OperationResource.GROUP: "user group",
    OperationResource.ROUTE: "alert route",
    OperationResource.PROMETHEUS: "prometheus collector",
    OperationResource.HPA: "autoscaler",
    OperationResource.CANARY: "traffic management",
    OperationResource.TEMPLATE: "release approval template",
    OperationResource.APPLICATION: "release approval request",
    OperationResource.STEP: "release approval step",
}
