from pydantic import BaseModel
from typing import List


class StudentFeedback(BaseModel):
    name: str
    matricula: str
    summary_fuentes_datos_segura: str
    summary_trabajo_en_equipo: str
    notes: str = ""


class FeedbackReport(BaseModel):
    students: List[StudentFeedback]
    notes: str = ""
