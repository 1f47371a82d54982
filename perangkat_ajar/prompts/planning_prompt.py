import json
from typing import List

from perangkat_ajar.schemas.planning_schema import AnnualPlanRow, CriteriaRow


def build_criteria_prompt(subject_name: str, class_level: str, rows: List[CriteriaRow]) -> str:
    atp_list = "\n".join(f'- ID: "{row.id}", ATP: "{row.display_line}"' for row in rows)

    return f"""
Berperanlah sebagai Guru Profesional dan Ahli Kurikulum Merdeka.
Buatkan deskripsi Kriteria Ketercapaian Tujuan Pembelajaran (KKTP) untuk mata pelajaran {subject_name} {class_level}.

DAFTAR ATP:
{atp_list}

Aturan:
1. Setiap ATP mendapat 4 level: belumTercapai, tercapaiSebagian, tuntas, tuntasPlus.
2. Deskripsi singkat, operasional, dan sesuai umur siswa.
3. Gunakan ID persis seperti yang diberikan.
4. Output harus dalam format JSON murni.

Struktur JSON:
[
  {{
    "id": "ID ATP",
    "kktp": {{
      "belumTercapai": "...",
      "tercapaiSebagian": "...",
      "tuntas": "...",
      "tuntasPlus": "..."
    }}
  }}
]
"""


def _rows_for_prompt(rows: List[AnnualPlanRow]) -> str:
    return json.dumps(
        [{"id": r.id, "material": r.material, "scope": r.material_scope, "atp": r.learning_goal_pathway} for r in rows],
        ensure_ascii=False,
    )


def build_allocation_prompt(ganjil_rows: List[AnnualPlanRow], genap_rows: List[AnnualPlanRow], max_ganjil: int, max_genap: int) -> str:
    return f"""
Alokasikan Jam Pelajaran (JP) untuk materi-materi berikut.
BATASAN ANGGARAN:
- SEMESTER GANJIL: Maks {max_ganjil} JP.
- SEMESTER GENAP: Maks {max_genap} JP.

DATA MATERI:
- Ganjil: {_rows_for_prompt(ganjil_rows)}
- Genap: {_rows_for_prompt(genap_rows)}

Aturan:
1. Distribusi proporsional sesuai kompleksitas.
2. Total per semester TIDAK BOLEH melebihi batasan anggaran.
3. Alokasi harus bilangan bulat.
Output JSON: [{{"id": "...", "alokasiWaktu": number}}, ...]
"""


def build_schedule_prompt(sessions: List[dict], groups: List[dict]) -> str:
    return f"""
Anda adalah ahli kurikulum Sekolah Dasar. Tugas Anda adalah membagi Lingkup Materi ke dalam sesi mengajar yang tersedia pada Program Semester (PROSEM).

DAFTAR SESI MENGAJAR YANG TERSEDIA (SESUAI KALENDER & JADWAL):
Sesi ini diurutkan berdasarkan tanggal. Gunakan sesi ini SATU PER SATU.
{json.dumps(sessions, ensure_ascii=False, indent=2)}

DATA MATERI YANG HARUS DIJADWALKAN:
{json.dumps(groups, ensure_ascii=False, indent=2)}

ATURAN PENJADWALAN:
1. Jangan pernah menggunakan tanggal yang sama untuk dua baris materi yang berbeda.
2. Isikan jadwal secara berurutan dari sub-materi pertama ke terakhir.
3. Satu sub-materi dapat menggunakan satu atau lebih sesi mengajar sesuai JP yang dibutuhkan.
4. Total JP per materi harus sesuai dengan 'totalProtaJP'.
5. Sumatif Lingkup Materi (isSLM: true) wajib dialokasikan TEPAT 2 JP pada satu sesi tersendiri di akhir materi tersebut.
6. 'keterangan' diisi dengan tanggal sesi yang digunakan (format dd-mm-yyyy), dipisahkan koma.

FORMAT OUTPUT (Array JSON murni):
[
  {{ "id": "row1_0", "alokasiWaktu": 4, "sessionIds": ["session-2024-07-15", "session-2024-07-17"], "keterangan": "15-07-2024, 17-07-2024" }},
  {{ "id": "row1_slm", "alokasiWaktu": 2, "sessionIds": ["session-2024-07-22"], "keterangan": "22-07-2024" }}
]
"""
