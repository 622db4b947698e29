import json
import tempfile
import unittest
from pathlib import Path

from catalog_fixtures import catalog_document, records
from ringgraph.catalog import Project, catalog_from_data, load_catalog, parse_projects


class CatalogUnitTests(unittest.TestCase):
    def test_sections_are_merged_and_invalid_records_skipped(self):
        catalog = catalog_from_data(catalog_document())

        ids = [p.id for p in catalog.projects]
        self.assertEqual(ids, [r["id"] for r in records()])
        self.assertEqual(len(catalog.collections), 2)

    def test_camel_case_fields_are_read(self):
        project = parse_projects(records(1))[0]

        self.assertEqual(project.technical_details.frame_rate, "60 FPS")
        self.assertTrue(project.technical_details.scientific_accuracy)
        self.assertTrue(project.experience.audio_reactive)
        self.assertEqual(project.parameter_count, 3)

    def test_missing_and_malformed_fields_fall_back_to_defaults(self):
        project = Project.model_validate(
            {"id": "bare", "experience": "not an object", "outputs": {"formats": "PNG"}, "parameters": None}
        )

        self.assertEqual(project.category, "")
        self.assertFalse(project.experience.vr_compatible)
        self.assertEqual(project.outputs.formats, ["PNG"])
        self.assertEqual(project.parameter_count, 0)

    def test_blank_id_is_rejected(self):
        self.assertEqual(parse_projects([{"id": "  "}, "junk", {"id": "ok"}])[0].id, "ok")

    def test_load_catalog_reads_a_flat_project_list(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "catalog.json"
            path.write_text(json.dumps(records(3)), encoding="utf-8")

            catalog = load_catalog(path)

        self.assertEqual(len(catalog.projects), 3)
        self.assertEqual(catalog.collections, [])


if __name__ == "__main__":
    unittest.main()
