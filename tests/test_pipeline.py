import io
import re
import zipfile

import pytest

import feedback
from errors import EmptyGenerationError, ExtractionError, GenerationFailedError
from extractors.payload import TabularPayloadBuilder
from feedback import FeedbackPipeline
from prompts.feedback import DATA_END_MARKER, DATA_START_MARKER, SUMMARY_SYSTEM_PROMPT


def test_extract_payload_from_saved_workbook(
    fake_service_cls, json_config, make_workbook_bytes, evaluation_sheets, expected_payload
):
    pipeline = FeedbackPipeline(fake_service_cls(), json_config)
    assert pipeline.extract_payload(make_workbook_bytes(evaluation_sheets)) == expected_payload


def test_extract_payload_from_path(
    tmp_path, fake_service_cls, json_config, make_workbook_bytes, evaluation_sheets, expected_payload
):
    path = tmp_path / "evaluaciones.xlsx"
    path.write_bytes(make_workbook_bytes(evaluation_sheets))
    pipeline = FeedbackPipeline(fake_service_cls(), json_config)
    assert pipeline.extract_payload(str(path)) == expected_payload


def test_run_sends_directive_and_payload(
    fake_service_cls, json_config, make_workbook_bytes, evaluation_sheets, expected_payload
):
    service = fake_service_cls(reply='{"students": [], "notes": "ok"}')
    response = FeedbackPipeline(service, json_config).run(
        make_workbook_bytes(evaluation_sheets), "evaluaciones.xlsx"
    )

    assert response.text == '{"students": [], "notes": "ok"}'
    assert response.media_type == "application/json"
    assert len(service.calls) == 1
    system_prompt, user_prompt = service.calls[0]
    assert system_prompt == SUMMARY_SYSTEM_PROMPT
    assert f"{DATA_START_MARKER}\n{expected_payload}\n{DATA_END_MARKER}" in user_prompt


def test_run_in_file_mode(fake_service_cls, file_config, make_workbook_bytes, evaluation_sheets):
    service = fake_service_cls(reply="nombre,resumen\nAna,bien\n")
    response = FeedbackPipeline(service, file_config).run(
        make_workbook_bytes(evaluation_sheets), "evaluaciones.xlsx"
    )
    assert response.body == b"nombre,resumen\nAna,bien\n"
    assert response.filename == "resultado_evaluaciones.xlsx"


def test_workbook_without_named_sheets_still_calls_service(
    fake_service_cls, json_config, make_workbook_bytes
):
    service = fake_service_cls()
    FeedbackPipeline(service, json_config).run(make_workbook_bytes({"Hoja1": [["x"]]}))
    _, user_prompt = service.calls[0]
    assert f"{DATA_START_MARKER}\n\n{DATA_END_MARKER}" in user_prompt


def test_corrupt_file_is_an_extraction_error(fake_service_cls, json_config):
    service = fake_service_cls()
    with pytest.raises(ExtractionError):
        FeedbackPipeline(service, json_config).run(b"this is not a spreadsheet")
    assert service.calls == []


def test_workbook_is_closed_when_extraction_fails(monkeypatch, fake_service_cls, json_config):
    class SpyWorkbook:
        closed = False
        sheetnames = ["Lista"]

        def __getitem__(self, name):
            raise RuntimeError("broken sheet")

        def close(self):
            self.closed = True

    spy = SpyWorkbook()
    monkeypatch.setattr(feedback, "open_workbook", lambda source: spy)

    service = fake_service_cls()
    with pytest.raises(ExtractionError):
        FeedbackPipeline(service, json_config).run(b"ignored")
    assert spy.closed
    assert service.calls == []


def test_workbook_is_closed_before_generation(
    monkeypatch, fake_service_cls, json_config, make_workbook, evaluation_sheets
):
    wb = make_workbook(evaluation_sheets)
    events = []
    original_close = wb.close

    def close():
        events.append("close")
        original_close()

    wb.close = close
    monkeypatch.setattr(feedback, "open_workbook", lambda source: wb)

    class OrderedService(fake_service_cls):
        def generate(self, system_prompt, prompt):
            events.append("generate")
            return super().generate(system_prompt, prompt)

    FeedbackPipeline(OrderedService(), json_config).run(b"ignored")
    assert events == ["close", "generate"]


def test_service_failure_is_wrapped(fake_service_cls, json_config, make_workbook_bytes, evaluation_sheets):
    cause = ConnectionError("network down")
    service = fake_service_cls(error=cause)
    with pytest.raises(GenerationFailedError) as excinfo:
        FeedbackPipeline(service, json_config).run(make_workbook_bytes(evaluation_sheets))
    assert excinfo.value.__cause__ is cause
    assert len(service.calls) == 1


@pytest.mark.parametrize("reply", [None, ""])
def test_empty_reply_fails(reply, fake_service_cls, json_config, make_workbook_bytes, evaluation_sheets):
    service = fake_service_cls(reply=reply)
    with pytest.raises(EmptyGenerationError):
        FeedbackPipeline(service, json_config).run(make_workbook_bytes(evaluation_sheets))


def test_generation_result_records_provider(fake_service_cls, json_config):
    pipeline = FeedbackPipeline(fake_service_cls(reply="x"), json_config)
    result = pipeline.generate(pipeline.build_request([]))
    assert result.content == "x"
    assert result.provider == "fake"
    assert result.model == "fake-1"


def test_sheet_names_come_from_config(fake_service_cls, json_config, make_workbook_bytes):
    config = json_config.model_copy(update={"sheet_names": ("Roster",)})
    pipeline = FeedbackPipeline(fake_service_cls(), config)
    payload = pipeline.extract_payload(make_workbook_bytes({"Roster": [["Ana"]], "Lista": [["x"]]}))
    assert payload == "Sheet: Roster\nAna\n\n"
    assert TabularPayloadBuilder(config.sheet_names).sheet_names == ("Roster",)


def _rewrite_dimension(data: bytes, ref: str) -> bytes:
    """Copy of an .xlsx archive whose sheets declare *ref* as their used range."""
    src = zipfile.ZipFile(io.BytesIO(data))
    out = io.BytesIO()
    with zipfile.ZipFile(out, "w", zipfile.ZIP_DEFLATED) as dst:
        for item in src.infolist():
            content = src.read(item.filename)
            if item.filename.startswith("xl/worksheets/sheet"):
                content = re.sub(
                    rb'<dimension ref="[^"]*"\s*/>',
                    f'<dimension ref="{ref}"/>'.encode(),
                    content,
                )
                assert f'<dimension ref="{ref}"/>'.encode() in content
            dst.writestr(item, content)
    return out.getvalue()


def test_wrong_declared_dimension_does_not_drop_cells(
    fake_service_cls, json_config, make_workbook_bytes, evaluation_sheets, expected_payload
):
    data = _rewrite_dimension(make_workbook_bytes(evaluation_sheets), "A1:A1")
    pipeline = FeedbackPipeline(fake_service_cls(), json_config)
    assert pipeline.extract_payload(data) == expected_payload
