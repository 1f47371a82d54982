import re
import json
import logging
from typing import Dict, List, Optional

from perangkat_ajar.gemini_client import GeminiError, gemini_client
from perangkat_ajar.prompts.planning_prompt import (
    build_allocation_prompt,
    build_criteria_prompt,
    build_schedule_prompt,
)
from perangkat_ajar.schemas.planning_schema import (
    AchievementLevels,
    Semester,
    TeachingSession,
    empty_week_selections,
)
from perangkat_ajar.services.override_merger import SLM_DEFAULT_PERIODS
from perangkat_ajar.services.path_resolver import entry_key
from perangkat_ajar.services.planning_service import PlanningService

logger = logging.getLogger(__name__)

CLASS_LEVELS = ["Kelas I", "Kelas II", "Kelas III", "Kelas IV", "Kelas V", "Kelas VI"]


class SuggestionError(Exception):
    pass


def parse_json_answer(text: str):
    match = re.search(r'(\{.*\}|\[.*\])', text or "", re.DOTALL)
    if not match:
        raise SuggestionError("AI tidak memberikan format data yang benar.")
    try:
        return json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise SuggestionError(f"Jawaban AI bukan JSON yang valid: {e}") from e


def session_id(session: TeachingSession) -> str:
    return f"session-{session.date.isoformat()}"


def _session_date(session: TeachingSession) -> str:
    return session.date.strftime("%d-%m-%Y")


def _as_count(value) -> Optional[int]:
    if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
        return value
    return None


def _is_empty(levels: AchievementLevels) -> bool:
    return not any(value.strip() for value in levels.model_dump().values())


class SuggestionService:
    """
    Asks Gemini for field values and saves them through the normal save path,
    exactly like a manual edit.
    """

    def __init__(self, planning: PlanningService, client=None):
        self.planning = planning
        self.client = client or gemini_client

    async def _ask(self, prompt: str):
        try:
            text = await self.client.generate_content(prompt)
        except GeminiError as e:
            raise SuggestionError(str(e)) from e
        return parse_json_answer(text)

    async def suggest_criteria(self, academic_year: str, class_level: str, subject: str, semester, teacher_id: Optional[str] = None, overwrite: bool = False) -> List[str]:
        data = await self.planning.get_criteria(academic_year, class_level, subject, semester, teacher_id)
        targets = [row for row in data.rows if overwrite or _is_empty(row.criteria)]
        if not targets:
            return []

        subject_name = await self.planning.subject_name(academic_year, class_level, subject, teacher_id)
        answer = await self._ask(build_criteria_prompt(subject_name, class_level, targets))
        if not isinstance(answer, list):
            raise SuggestionError("AI tidak memberikan daftar KKTP.")

        wanted = {row.id for row in targets}
        proposals: Dict[str, AchievementLevels] = {}
        for item in answer:
            if not isinstance(item, dict) or item.get("id") not in wanted:
                continue
            levels = item.get("kktp")
            if isinstance(levels, dict):
                proposals[item["id"]] = AchievementLevels.model_validate(
                    {key: value for key, value in levels.items() if isinstance(value, str)}
                )

        if not proposals:
            raise SuggestionError("AI tidak mengembalikan KKTP untuk ATP yang diminta.")

        rows = [
            row.model_copy(update={"criteria": proposals[row.id]}) if row.id in proposals else row
            for row in data.rows
        ]
        await self.planning.save_criteria(academic_year, class_level, subject, semester, data.model_copy(update={"rows": rows}), teacher_id)
        logger.info(f"KKTP suggested for {subject} {class_level} ({Semester(semester).value}): {len(proposals)} rows")
        return [row.id for row in data.rows if row.id in proposals]

    async def suggest_annual_allocation(self, academic_year: str, class_level: str, subject: str, teacher_id: Optional[str] = None) -> List[str]:
        plan = await self.planning.get_annual_plan(academic_year, class_level, subject, teacher_id)
        if not plan.ganjil_rows and not plan.genap_rows:
            raise SuggestionError("ATP belum diisi, tidak ada data untuk dianalisis.")

        ganjil_budget = await self.planning.get_period_budget(academic_year, class_level, subject, Semester.GANJIL, teacher_id)
        genap_budget = await self.planning.get_period_budget(academic_year, class_level, subject, Semester.GENAP, teacher_id)
        if not any(ganjil_budget.weekly_periods.values()):
            raise SuggestionError(f"Jadwal pelajaran untuk {ganjil_budget.subject_name} belum diatur.")

        answer = await self._ask(build_allocation_prompt(plan.ganjil_rows, plan.genap_rows, ganjil_budget.budget, genap_budget.budget))
        if not isinstance(answer, list):
            raise SuggestionError("AI tidak memberikan daftar alokasi waktu.")

        proposals = {}
        for item in answer:
            value = _as_count(item.get("alokasiWaktu")) if isinstance(item, dict) else None
            if value is not None:
                proposals[item.get("id")] = value

        def apply(rows, budget, label):
            updated = [
                row.model_copy(update={"allocated_periods": proposals[row.id]}) if row.id in proposals else row
                for row in rows
            ]
            total = sum(row.allocated_periods for row in updated)
            if total > budget:
                raise SuggestionError(f"Alokasi semester {label} ({total} JP) melebihi batas {budget} JP.")
            return updated

        ganjil_rows = apply(plan.ganjil_rows, ganjil_budget.budget, Semester.GANJIL.value)
        genap_rows = apply(plan.genap_rows, genap_budget.budget, Semester.GENAP.value)

        await self.planning.save_annual_plan(
            academic_year, class_level, subject,
            plan.model_copy(update={"ganjil_rows": ganjil_rows, "genap_rows": genap_rows}),
            teacher_id,
        )
        return [row.id for row in ganjil_rows + genap_rows if row.id in proposals]

    async def suggest_semester_schedule(self, academic_year: str, class_level: str, subject: str, semester, teacher_id: Optional[str] = None) -> List[str]:
        """
        Spreads the PROSEM rows over the semester's teaching sessions. Each
        session goes to at most one row (the first that claims it); a row's
        week flags and notes come from its sessions, and an SLM row always
        gets 2 JP.
        """
        plan = await self.planning.get_semester_plan(academic_year, class_level, subject, semester, teacher_id)
        if not plan.rows:
            raise SuggestionError("PROSEM masih kosong, isi ATP dan PROTA terlebih dahulu.")

        sessions = await self.planning.get_teaching_sessions(academic_year, class_level, subject, semester, teacher_id)
        if not sessions:
            raise SuggestionError("Tidak ada sesi mengajar. Periksa jadwal pelajaran dan kalender pendidikan.")

        annual = await self.planning.get_annual_plan(academic_year, class_level, subject, teacher_id)
        annual_rows = annual.ganjil_rows if Semester(semester) == Semester.GANJIL else annual.genap_rows
        groups = {}
        for annual_row in annual_rows:
            groups[annual_row.id] = {"totalProtaJP": annual_row.allocated_periods, "topic": annual_row.material, "subTopics": []}
        for row in plan.rows:
            if row.annual_row_id in groups:
                groups[row.annual_row_id]["subTopics"].append({"id": row.id, "isSLM": row.is_slm, "text": row.scope_line})

        prompt_sessions = [
            {"id": session_id(s), "date": _session_date(s), "jp": s.periods, "weekKey": s.week_key}
            for s in sessions
        ]
        answer = await self._ask(build_schedule_prompt(prompt_sessions, list(groups.values())))
        if not isinstance(answer, list):
            raise SuggestionError("AI tidak memberikan daftar jadwal PROSEM.")

        by_id = {session_id(s): s for s in sessions}
        wanted = {row.id for row in plan.rows}
        used = set()
        proposals = {}
        for item in answer:
            if not isinstance(item, dict) or item.get("id") not in wanted or item["id"] in proposals:
                continue
            claimed = []
            session_ids = item.get("sessionIds")
            for sid in session_ids if isinstance(session_ids, list) else []:
                if sid in by_id and sid not in used:
                    used.add(sid)
                    claimed.append(by_id[sid])
            proposals[item["id"]] = (_as_count(item.get("alokasiWaktu")), sorted(claimed, key=lambda s: s.date))

        if not proposals:
            raise SuggestionError("AI tidak mengembalikan jadwal untuk baris PROSEM yang diminta.")

        rows = []
        for row in plan.rows:
            if row.id not in proposals:
                rows.append(row)
                continue
            periods, claimed = proposals[row.id]
            weeks = empty_week_selections()
            for session in claimed:
                weeks[session.week_key] = True
            if row.is_slm:
                periods = SLM_DEFAULT_PERIODS
            elif periods is None:
                periods = sum(session.periods for session in claimed)
            rows.append(row.model_copy(update={
                "allocated_periods": periods,
                "week_selections": weeks,
                "notes": ", ".join(_session_date(session) for session in claimed),
            }))

        await self.planning.save_semester_plan(academic_year, class_level, subject, semester, plan.model_copy(update={"rows": rows}), teacher_id)
        logger.info(f"PROSEM scheduled for {subject} {class_level} ({Semester(semester).value}): {len(proposals)} rows, {len(used)} sessions")
        return [row.id for row in plan.rows if row.id in proposals]

    async def suggest_criteria_for_all(self, academic_year: str) -> Dict[str, List[str]]:
        """
        Generate KKTP massal: every master subject of every class, both
        semesters. A failing subject is logged and reported, the rest go on.
        """
        done, failed = [], []
        for class_level in CLASS_LEVELS:
            catalog = await self.planning.get_subjects(academic_year, class_level)
            for entry in catalog.subjects:
                for semester in Semester:
                    label = f"{entry.name} - {class_level} - Semester {semester.value}"
                    logger.info(f"Memproses {label}...")
                    try:
                        await self.suggest_criteria(academic_year, class_level, entry_key(entry), semester)
                    except SuggestionError as e:
                        logger.error(f"KKTP gagal untuk {label}: {e}")
                        failed.append(label)
                        continue
                    done.append(label)
        return {"done": done, "failed": failed}
