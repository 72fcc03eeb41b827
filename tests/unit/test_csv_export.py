# =============================================================================
# tests/unit/test_csv_export.py
# Unit Tests for the CSV export
# =============================================================================

from datetime import date


class TestCasesToCsv:
    """Test CSV rendering"""

    def test_empty_list_gives_empty_string(self):
        """No cases, no header"""
        from firstaid_core.export.csv_export import cases_to_csv

        assert cases_to_csv([]) == ""

    def test_header_and_line_count(self, sample_cases):
        """N cases give N+1 lines, each newline-terminated"""
        from firstaid_core.export.csv_export import CSV_HEADERS, cases_to_csv

        text = cases_to_csv(sample_cases)
        lines = text.split("\n")

        assert text.endswith("\n")
        assert lines[-1] == ""
        assert len(lines) - 1 == len(sample_cases) + 1
        assert lines[0] == ",".join(CSV_HEADERS)
        assert lines[0].startswith("Serial,Date,Time,Location of Incident,Company Type,Contractor Name")

    def test_serial_follows_display_order(self, sample_cases):
        """Serial numbers count from 1 in the given order"""
        from firstaid_core.export.csv_export import cases_to_csv

        lines = cases_to_csv(sample_cases).splitlines()[1:]

        assert [line.split(",")[0] for line in lines] == ["1", "2", "3"]

    def test_comma_fields_are_quoted(self, case_factory):
        """A description containing a comma is wrapped in quotes"""
        from firstaid_core.export.csv_export import cases_to_csv

        text = cases_to_csv([case_factory(injury_description="Cut, bruise")])

        assert ',"Cut, bruise",' in text

    def test_embedded_quotes_not_escaped(self, case_factory):
        """Quotes inside a field are left untouched"""
        from firstaid_core.export.csv_export import cases_to_csv

        text = cases_to_csv([case_factory(injury_description='Said "ouch"')])

        assert ',Said "ouch",' in text

    def test_row_values(self, case_factory):
        """Contractor, body parts and referral columns are formatted"""
        from firstaid_core.export.csv_export import case_to_row
        from firstaid_core.models.case import CompanyType

        contractor = case_factory(
            company_type=CompanyType.CONTRACTOR,
            contractor_name="Gulf Scaffolding",
            injured_body_parts=["Leg", "Ankle"],
            referred_to_hospital=True,
        )
        row = case_to_row(contractor, 7)

        assert row[0] == 7
        assert row[4] == "Contractor"
        assert row[5] == "Gulf Scaffolding"
        assert row[11] == "Leg; Ankle"
        assert row[13] == "Yes"

    def test_contractor_label(self, case_factory):
        """N/A for non-contractors and for blank contractor names"""
        from firstaid_core.export.csv_export import contractor_label
        from firstaid_core.models.case import CompanyType

        assert contractor_label(case_factory(contractor_name="Ignored")) == "N/A"
        assert contractor_label(case_factory(company_type=CompanyType.CONTRACTOR, contractor_name="")) == "N/A"


class TestExportFilename:
    """Test the download file name"""

    def test_filename_for_day(self):
        """first-aid-cases-YYYY-MM-DD.csv"""
        from firstaid_core.export.csv_export import export_filename

        assert export_filename(date(2024, 5, 1)) == "first-aid-cases-2024-05-01.csv"
