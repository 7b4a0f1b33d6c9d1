"""
Registration storage.

A store holds flat registration documents keyed by registrationId and offers
three operations: put, scan_all and delete_by_id. Backends:

- DynamoDBRegistrationStore: a DynamoDB table (boto3), the production store
- MongoRegistrationStore: a MongoDB collection (pymongo)
- InMemoryRegistrationStore: a dict, for local runs and tests

Any backend failure is raised as StoreError. Deleting an id that does not
exist is not an error.
"""

import logging
import threading
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any, Dict, List

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from pymongo import MongoClient
from pymongo.errors import PyMongoError

from config import Settings
from errors import StoreError

logger = logging.getLogger(__name__)

PRIMARY_KEY = "registrationId"


class RegistrationStore(ABC):
    @abstractmethod
    def put(self, item: Dict[str, Any]) -> None:
        ...

    @abstractmethod
    def scan_all(self) -> List[Dict[str, Any]]:
        ...

    @abstractmethod
    def delete_by_id(self, registration_id: str) -> None:
        ...


class InMemoryRegistrationStore(RegistrationStore):
    def __init__(self):
        self._items: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.Lock()

    def put(self, item):
        with self._lock:
            self._items[item[PRIMARY_KEY]] = dict(item)

    def scan_all(self):
        with self._lock:
            return [dict(item) for item in self._items.values()]

    def delete_by_id(self, registration_id):
        with self._lock:
            self._items.pop(registration_id, None)


def _from_dynamo(value):
    """boto3 hands numbers back as Decimal; registrations only hold integers."""
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, dict):
        return {k: _from_dynamo(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_from_dynamo(v) for v in value]
    return value


class DynamoDBRegistrationStore(RegistrationStore):
    def __init__(self, table):
        self.table = table

    @classmethod
    def from_settings(cls, settings: Settings) -> "DynamoDBRegistrationStore":
        dynamodb = boto3.resource(
            "dynamodb",
            region_name=settings.AWS_REGION,
            endpoint_url=settings.DYNAMODB_ENDPOINT_URL,
        )
        return cls(dynamodb.Table(settings.TABLE_NAME))

    def _fail(self, operation, error, **context):
        logger.error(
            "DynamoDB operation failed",
            exc_info=error,
            extra={"tableName": self.table.name, "operation": operation, **context},
        )
        return StoreError(operation, error)

    def put(self, item):
        try:
            self.table.put_item(Item=item)
        except (ClientError, BotoCoreError) as e:
            raise self._fail("PutItem", e, registrationId=item.get(PRIMARY_KEY)) from e
        logger.info(
            "Registration saved to DynamoDB",
            extra={"registrationId": item[PRIMARY_KEY], "tableName": self.table.name},
        )

    def scan_all(self):
        items = []
        kwargs = {}
        try:
            while True:
                response = self.table.scan(**kwargs)
                items.extend(response.get("Items", []))
                last_key = response.get("LastEvaluatedKey")
                if not last_key:
                    break
                kwargs["ExclusiveStartKey"] = last_key
        except (ClientError, BotoCoreError) as e:
            raise self._fail("Scan", e) from e
        return [_from_dynamo(item) for item in items]

    def delete_by_id(self, registration_id):
        try:
            self.table.delete_item(Key={PRIMARY_KEY: registration_id})
        except (ClientError, BotoCoreError) as e:
            raise self._fail("DeleteItem", e, registrationId=registration_id) from e


class MongoRegistrationStore(RegistrationStore):
    """Documents use registrationId as _id; _id is dropped again on reads."""

    def __init__(self, collection):
        self.collection = collection

    @classmethod
    def from_settings(cls, settings: Settings) -> "MongoRegistrationStore":
        client = MongoClient(settings.DATABASE_URL)
        return cls(client[settings.DATABASE_NAME][settings.TABLE_NAME])

    def _fail(self, operation, error, **context):
        logger.error(
            "MongoDB operation failed",
            exc_info=error,
            extra={"collection": self.collection.name, "operation": operation, **context},
        )
        return StoreError(operation, error)

    def put(self, item):
        doc = {"_id": item[PRIMARY_KEY], **item}
        try:
            self.collection.replace_one({"_id": doc["_id"]}, doc, upsert=True)
        except PyMongoError as e:
            raise self._fail("replace_one", e, registrationId=item.get(PRIMARY_KEY)) from e
        logger.info(
            "Registration saved to MongoDB",
            extra={"registrationId": item[PRIMARY_KEY], "collection": self.collection.name},
        )

    def scan_all(self):
        try:
            docs = list(self.collection.find({}))
        except PyMongoError as e:
            raise self._fail("find", e) from e
        for d in docs:
            d.pop("_id", None)
        return docs

    def delete_by_id(self, registration_id):
        try:
            self.collection.delete_one({"_id": registration_id})
        except PyMongoError as e:
            raise self._fail("delete_one", e, registrationId=registration_id) from e


STORE_BACKENDS = {
    "dynamodb": DynamoDBRegistrationStore.from_settings,
    "mongo": MongoRegistrationStore.from_settings,
    "memory": lambda settings: InMemoryRegistrationStore(),
}


def build_store(settings: Settings) -> RegistrationStore:
    try:
        factory = STORE_BACKENDS[settings.STORE_BACKEND.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown STORE_BACKEND {settings.STORE_BACKEND!r}, "
            f"expected one of: {', '.join(STORE_BACKENDS)}"
        ) from None
    return factory(settings)
