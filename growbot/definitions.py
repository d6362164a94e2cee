"""Shared constants and enumerations of the grow controller."""

from enum import IntEnum

GROWBOT_FIRMWARE = 1

SERIAL_BUFFER_SIZE = 256

# Pins
SD_CONTROL_PIN = 19
ESP_CONTROL_PIN = 8
TX_DATA_PIN = 14
RX_DATA_PIN = 15
DHT_DATA_PIN = 18
OUT_MOS_1 = 9
OUT_MOS_2 = 10
OUT_TOP_1 = 9
OUT_TOP_2 = 10
OUT_TOP_3 = 51
OUT_TOP_4 = 52
LED1 = 11
LED2 = 12
LED3 = 13

# Remote controlled sockets
RC_SOCKETS = 8
RC_SIGNALS = 5
RC_REPEAT = 5

# JSON sizes
JSONCHAR_SIZE = 7500
JSONBUFFER_SIZE = 1000
JSONBUFFER_SMALL = 750
JSONBUFFER_BIG = 1500

# Network
PACKAGE_SIZE = 1024

# Settings
DEBUG_RESET = False

# Timing
TASK_FRQ_SEC = 1
SENS_FRQ_SEC = 5
HALTSTATE = 20
MILLIS_SEC = 1000

# Sensor history sizes
SENS_VALUES_MIN = 60 // SENS_FRQ_SEC
SENS_VALUES_HOUR = 60
SENS_VALUES_DAY = 96
SENS_VALUES_MONTH = 56
SENS_VALUES_YEAR = 52

SENS_NUM = 4

# Rules engine
TRIGGER_TYPES = 5
TRIGGER_SETS = 8
RULESETS_NUM = 32
ACTIONS_NUM = 8
ACTIONCHAINS_NUM = 16
ACTIONCHAIN_LENGTH = 4

# Task manager
TASK_QUEUE_LENGTH = 120
ACTIONCHAIN_TASK_MAXDURATION = TASK_QUEUE_LENGTH // ACTIONCHAIN_LENGTH
TASK_PARALLEL_SEC = 4

# Log engine
LOGBUFFER_SIZE = 5

# REST API
REST_URI_DEPTH = 4


class RelOp(IntEnum):
    """Relational operator used when comparing sensor values."""

    SMALLER = 0
    EQUAL = 1
    GREATER = 2
    NOTEQUAL = 3


class BoolOp(IntEnum):
    """Boolean operator joining triggers in a rule set."""

    AND = 0
    OR = 1
    NOT = 2


class Interval(IntEnum):
    """Averaging interval of sensor readings."""

    REALTIME = 0
    TENSEC = 1
    TWENTYSEC = 2
    THIRTYSEC = 3
    ONEMIN = 4
    TWOMIN = 5
    FIVEMIN = 6
    QUARTER = 7
    HALF = 8
    ONE = 9
    TWO = 10
    THREE = 11
    FOUR = 12
    SIX = 13
    TWELVE = 14
    DAILY = 15
    BIDAILY = 16
    WEEKLY = 17
    BIWEEKLY = 18


class Scope(IntEnum):
    """How much of an object a serialisation includes."""

    LIST = 0
    HEADER = 1
    DETAILS = 2
    AVG = 3
    DATE_MINUTE = 4
    DATE_HOUR = 5
    DATE_DAY = 6
    DATE_MONTH = 7
    DATE_YEAR = 8
    DATE_ALL = 9


class TriggerType(IntEnum):
    """Category of a trigger."""

    TIME = 0
    SENSOR = 1