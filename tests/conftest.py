import copy

import pytest

from perangkat_ajar.services.document_store import path_key


class InMemoryDocumentStore:
    """Dict-backed stand-in for SqlDocumentStore; keeps a log of writes."""

    def __init__(self, documents=None):
        self.documents = {}
        self.writes = []
        for key, document in (documents or {}).items():
            self.documents[key] = copy.deepcopy(document)

    async def read(self, path):
        document = self.documents.get(path_key(path))
        return copy.deepcopy(document) if document is not None else None

    async def write(self, path, document):
        key = path_key(path)
        self.writes.append(key)
        self.documents[key] = copy.deepcopy(document)

    def put(self, path, document):
        self.documents[path_key(path)] = copy.deepcopy(document)

    def get(self, path):
        return self.documents.get(path_key(path))


def atp_document(*rows):
    return {"rows": list(rows)}


def atp_row(row_id, pathway="", scope="", material="Bilangan", element="Bilangan"):
    return {
        "id": row_id,
        "element": element,
        "learningGoalPathway": pathway,
        "material": material,
        "materialScope": scope,
    }


def catalog(*entries):
    return {"subjects": [{"id": i, "code": code, "name": name, "hours": 0} for i, code, name in entries]}


@pytest.fixture
def store():
    return InMemoryDocumentStore()
