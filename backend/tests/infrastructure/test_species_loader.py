"""Species Loader — CSV parsing into SpeciesTable (tmp files, no network)."""

from greenpoint.config import Settings
from greenpoint.infrastructure.species_loader import load_species_table

CSV = (
    "ScientificName,COMNAME,LIFO,TMIN,TMAX,PHMIN,PHMAX\n"
    'Zea mays,"maize, corn, Indian corn",herb,10,47,4.5,8.5\n'
    'Zizania aquatica,"wild rice",herb,NA,NA,,abc\n'
    ',"orphan row",herb,1,2,3,4\n'
)


def test_loads_rows_in_file_order(tmp_path):
    path = tmp_path / "EcoCrop_DB.csv"
    path.write_text(CSV, encoding="utf-8")
    table = load_species_table(path)

    assert [r.scientific_name for r in table.records()] == ["Zea mays", "Zizania aquatica"]
    zea = table.find("zea mays")
    assert zea.common_names == ("maize", "corn", "Indian corn")
    assert zea.min_ph == 4.5


def test_unparsable_numbers_kept_as_none(tmp_path):
    path = tmp_path / "EcoCrop_DB.csv"
    path.write_text(CSV, encoding="utf-8")
    zizania = load_species_table(path).find("Zizania aquatica")

    assert zizania.min_temp is None
    assert zizania.max_temp is None
    assert zizania.min_ph is None
    assert zizania.max_ph is None


def test_bom_header_is_handled(tmp_path):
    path = tmp_path / "EcoCrop_DB.csv"
    path.write_text(CSV, encoding="utf-8-sig")
    assert len(load_species_table(path)) == 2


def test_missing_file_yields_empty_table(tmp_path):
    table = load_species_table(tmp_path / "nope.csv")
    assert len(table) == 0


def test_non_utf8_file_yields_empty_table(tmp_path):
    path = tmp_path / "EcoCrop_DB.csv"
    path.write_bytes(
        "ScientificName,COMNAME\nZea mays,\"ma\xefs, corn\"\n".encode("latin-1"),
    )
    table = load_species_table(path)
    assert len(table) == 0


def test_bundled_table_contains_zea_mays():
    table = load_species_table(Settings().species_csv_path)
    record = table.find("Zea mays")
    assert record.min_temp == 10.0
    assert "corn" in record.common_names
