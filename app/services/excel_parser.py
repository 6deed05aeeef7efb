import pandas as pd
from typing import List, Dict


class ExcelDataParser:
    """
    Парсер списков получателей из Excel файлов.
    """

    def parse_payee_rows(self, file_path: str, sheet_name=0) -> List[Dict[str, str]]:
        """
        Читает строки листа как записи: ключи - заголовки столбцов, значения - строки.
        """
        try:
            df = pd.read_excel(file_path, sheet_name=sheet_name, header=0, dtype=str)
        except Exception as e:
            raise RuntimeError(f"Не удалось прочитать Excel-файл: {e}")

        # Пустые ячейки превращаем в пустые строки
        df = df.fillna("")
        df.columns = [str(col).strip() for col in df.columns]
        return df.to_dict(orient="records")
