"""Shared test data: a small population table in PxWebApi v2 shape."""

import copy

from statcube.query import TableSession

TABLE_METADATA = {
    "version": "2.0",
    "class": "dataset",
    "label": "Befolkning, etter region, kjønn og år",
    "id": ["Region", "Kjonn", "ContentsCode", "Tid"],
    "size": [4, 2, 1, 5],
    "dimension": {
        "Region": {
            "label": "region",
            "category": {
                "index": {"0301": 0, "1103": 1, "4601": 2, "5001": 3},
                "label": {
                    "0301": "Oslo",
                    "1103": "Stavanger",
                    "4601": "Bergen",
                    "5001": "Trondheim",
                },
            },
            "extension": {
                "elimination": True,
                "codelists": [
                    {"id": "agg_Landsdeler", "label": "Landsdeler"},
                    {"id": "vs_Storbyer", "label": "Storbyer"},
                ],
            },
        },
        "Kjonn": {
            "label": "kjønn",
            "category": {
                "index": {"1": 0, "2": 1},
                "label": {"1": "Menn", "2": "Kvinner"},
            },
            "extension": {
                "elimination": False,
                "codelists": [{"id": "agg_KjonnTotal", "label": "Begge kjønn"}],
            },
        },
        "ContentsCode": {
            "label": "statistikkvariabel",
            "category": {
                "index": {"Folkemengde": 0},
                "label": {"Folkemengde": "Folkemengde"},
            },
            "extension": {"elimination": False},
        },
        "Tid": {
            "label": "år",
            "category": {
                "index": ["2019", "2020", "2021", "2022", "2023"],
                "label": {
                    "2019": "2019",
                    "2020": "2020",
                    "2021": "2021",
                    "2022": "2022",
                    "2023": "2023",
                },
            },
            "extension": {"elimination": False},
        },
    },
    "extension": {
        "px": {"heading": ["ContentsCode", "Tid"], "stub": ["Region", "Kjonn"]}
    },
}

SEX_YEAR_METADATA = {
    "id": ["Sex", "Year"],
    "dimension": {
        "Sex": {
            "label": "sex",
            "category": {"index": {"1": 0, "2": 1}, "label": {"1": "Male", "2": "Female"}},
        },
        "Year": {
            "label": "year",
            "category": {
                "index": ["2019", "2020", "2021", "2022", "2023"],
            },
        },
    },
}

CODELISTS = {
    "vs_Storbyer": {
        "id": "vs_Storbyer",
        "label": "Storbyer",
        "elimination": False,
        "values": [
            {"code": "0301", "label": "Oslo", "valueMap": ["0301"]},
            {"code": "4601", "label": "Bergen", "valueMap": ["4601"]},
            {"code": "5001", "label": "Trondheim", "valueMap": ["5001"]},
        ],
    },
    "agg_Landsdeler": {
        "id": "agg_Landsdeler",
        "label": "Landsdeler",
        "elimination": True,
        "values": [
            {"code": "Vest", "label": "Vestlandet", "valueMap": ["1103", "4601"]},
            {"code": "Ost", "label": "Østlandet", "valueMap": ["0301"]},
            {"code": "Midt", "label": "Trøndelag", "valueMap": ["5001"]},
        ],
    },
    "agg_KjonnTotal": {
        "id": "agg_KjonnTotal",
        "label": "Begge kjønn",
        "elimination": True,
        "values": [{"code": "0", "label": "Begge kjønn", "valueMap": ["1", "2"]}],
    },
}

# Kjonn (Sex) x Tid (Year), Tid changing fastest
DATASET = {
    "version": "2.0",
    "class": "dataset",
    "id": ["Kjonn", "Tid"],
    "size": [2, 2],
    "value": [10, 20, 30, 40],
    "dimension": {
        "Kjonn": {
            "label": "kjønn",
            "category": {"index": {"1": 0, "2": 1}, "label": {"1": "Menn", "2": "Kvinner"}},
        },
        "Tid": {
            "label": "år",
            "category": {"index": {"2022": 0, "2023": 1}},
        },
    },
}

# Region x Kjonn x Tid with a value per cell equal to its flat offset
DATASET_3D = {
    "id": ["Region", "Kjonn", "Tid"],
    "size": [2, 2, 3],
    "value": list(range(12)),
    "dimension": {
        "Region": {"category": {"index": ["0301", "4601"]}},
        "Kjonn": {"category": {"index": ["1", "2"]}},
        "Tid": {"category": {"index": ["2021", "2022", "2023"]}},
    },
}


def table_metadata():
    return copy.deepcopy(TABLE_METADATA)


def fetch_codelist(codelist_id):
    try:
        return copy.deepcopy(CODELISTS[codelist_id])
    except KeyError:
        raise LookupError(f"Codelist '{codelist_id}' not found") from None


async def fetch_codelist_async(codelist_id):
    return fetch_codelist(codelist_id)


def failing_fetcher(codelist_id):
    raise ConnectionError("Service unavailable")


def create_session(config=None):
    return TableSession.from_metadata(table_metadata(), config=config)
