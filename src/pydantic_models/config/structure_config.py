from typing import Optional
from pydantic import BaseModel

class StructureConfig(BaseModel):
    """
    Directory layout of the project.

    Attributes:
        prj_root (str): Project root; relative paths below are resolved against it.
        data_path (Optional[str]): Cache files (leave_data.json) live here (default: "data").
        output_path (Optional[str]): Generated CSV, workbooks and reports (default: "output").
        template_path (Optional[str]): Excel templates (default: "templates").
    """
    prj_root: str = "."
    data_path: Optional[str] = "data"
    output_path: Optional[str] = "output"
    template_path: Optional[str] = "templates"
