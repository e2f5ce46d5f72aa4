"""Literature sources shared by every record kind that names a database."""

from typing import Literal, get_args

LiteratureSource = Literal[
    "PubMed",
    "OpenAlex",
    "Crossref",
    "ClinicalTrials.gov",
    "Europe PMC",
    "Unpaywall",
]

LITERATURE_SOURCES: tuple[str, ...] = get_args(LiteratureSource)
