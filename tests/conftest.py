import copy

import pytest

from slacklog.models.reporters import ReporterConfig
from slacklog.sources.good import GoodSource

WEBHOOK_URL = "https://hooks.slack.com/services/T000/B000/XXXX"

# 2014-12-18 03:35:19.797 UTC
TIMESTAMP = 1418873719797
TIME_STRING = "141218/033519.797"

OPS = {
    "event": "ops",
    "timestamp": TIMESTAMP,
    "os": {
        "load": [1.650390625, 1.6162109375, 1.65234375],
        "mem": {"total": 17179869184, "free": 8190681088},
        "uptime": 704891,
    },
    "proc": {
        "uptime": 6,
        "mem": {"rss": 30019584, "heapTotal": 18635008, "heapUsed": 9989304},
        "delay": 0.03084501624107361,
    },
    "load": {"requests": {}, "concurrents": {}, "responseTimes": {}},
    "pid": 64291,
}

RESPONSE = {
    "event": "response",
    "method": "post",
    "statusCode": 200,
    "timestamp": TIMESTAMP,
    "instance": "localhost",
    "path": "/data",
    "responseTime": 150,
    "query": {"name": "diego"},
    "responsePayload": {"foo": "bar", "value": 1},
}

REQUEST = {
    "event": "request",
    "timestamp": TIMESTAMP,
    "tags": ["info"],
    "path": "/data",
    "method": "post",
    "data": "This is a request log",
    "pid": "10001",
    "id": "23147901234:Machine1:73489:8uasdf98:10000",
}

ERROR = {
    "event": "error",
    "timestamp": TIMESTAMP,
    "url": {
        "search": "?name=diego",
        "query": {"name": "diego"},
        "pathname": "/search",
        "path": "/search?name=diego",
        "href": "/search?name=diego",
    },
    "method": "get",
    "pid": 91426,
    "error": {
        "name": "Error",
        "message": "Something bad had happened",
        "stack": (
            "Error: Something bad had happened\n"
            "    at Object.<anonymous> (/slacklog/test/index.js:79:10)"
        ),
    },
}

LOG = {
    "event": "log",
    "timestamp": TIMESTAMP,
    "tags": ["info"],
    "data": "Server started at http://localhost:3000",
    "pid": 92682,
}


def parse(record: dict, **overrides):
    record = copy.deepcopy(record)
    record.update(overrides)
    return GoodSource().parse(record)


@pytest.fixture
def config() -> ReporterConfig:
    return ReporterConfig(url=WEBHOOK_URL, host="localhost")


@pytest.fixture
def basic_config() -> ReporterConfig:
    return ReporterConfig(url=WEBHOOK_URL, host="localhost", basic=True)
