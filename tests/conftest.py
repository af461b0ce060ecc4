import json
import os
from unittest.mock import MagicMock

import pytest

from firestore_client import VideoRepository
from video_stream import CloudinaryClient, VideoStreamConfig

# firebase_functions needs a default bucket to register the Storage trigger
# in main.py at import time.
os.environ.setdefault(
    "FIREBASE_CONFIG", json.dumps({"storageBucket": "test-bucket"})
)


class DummySnapshot:
    def __init__(self, doc_id, data):
        self.id = doc_id
        self.exists = data is not None
        self._data = data

    def to_dict(self):
        return dict(self._data) if self._data is not None else None


class DummyDoc:
    def __init__(self, collection, doc_id):
        self._collection = collection
        self.id = doc_id

    def get(self):
        return DummySnapshot(self.id, self._collection.docs.get(self.id))

    def update(self, data):
        if self.id not in self._collection.docs:
            raise KeyError(f"No document to update: {self.id}")
        self._collection.docs[self.id].update(data)
        self._collection.updates.append((self.id, data))


class DummyQuery:
    def __init__(self, collection, filters=(), limit=None):
        self._collection = collection
        self._filters = list(filters)
        self._limit = limit

    def where(self, *, filter):
        assert filter.op_string == "=="
        return DummyQuery(self._collection, self._filters + [filter], self._limit)

    def limit(self, count):
        return DummyQuery(self._collection, self._filters, count)

    def stream(self):
        matches = [
            DummySnapshot(doc_id, data)
            for doc_id, data in self._collection.docs.items()
            if all(data.get(f.field_path) == f.value for f in self._filters)
        ]
        if self._limit is not None:
            matches = matches[: self._limit]
        return iter(matches)


class DummyCollection(DummyQuery):
    def __init__(self):
        self.docs = {}
        self.updates = []
        super().__init__(self)

    def document(self, doc_id):
        return DummyDoc(self, doc_id)


class DummyFirestore:
    def __init__(self):
        self.collections = {}

    def collection(self, name):
        return self.collections.setdefault(name, DummyCollection())


@pytest.fixture
def config():
    return VideoStreamConfig(
        cloud_name="demo-cloud",
        api_key="key",
        api_secret="secret",
    )


@pytest.fixture
def db():
    return DummyFirestore()


@pytest.fixture
def videos(db):
    return VideoRepository(db=db, collection="videos")


@pytest.fixture
def cloudinary():
    client = MagicMock(spec=CloudinaryClient)
    client.cloud_name = "demo-cloud"
    client.upload_video.return_value = {
        "public_id": "hackethos4u/courses/c1/modules/m1/1700000000000",
        "secure_url": "https://res.cloudinary.com/demo-cloud/video/upload/v1/"
                      "hackethos4u/courses/c1/modules/m1/1700000000000.mp4",
        "duration": 12.5,
        "format": "mp4",
        "width": 1920,
        "height": 1080,
    }
    client.destroy_video.return_value = {"result": "ok"}
    return client


@pytest.fixture
def storage():
    bucket_storage = MagicMock()
    bucket_storage.make_public.side_effect = (
        lambda bucket, path: f"https://storage.googleapis.com/{bucket}/public-{path}"
    )
    bucket_storage.signed_url.side_effect = (
        lambda bucket, path: f"https://signed.example/{bucket}/{path}?sig=1"
    )
    return bucket_storage
