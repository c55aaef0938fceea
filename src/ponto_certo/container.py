from __future__ import annotations

from dataclasses import dataclass

from .closing.mysql_decision_repository import MySQLDecisionRepository
from .closing.service import MonthlyClosingService
from .database.connection import DBConfig, DatabaseConnection
from .documents.mysql_document_repository import MySQLDocumentRepository
from .documents.service import DocumentService
from .holiday_calendar.mysql_holiday_repository import MySQLHolidayRepository
from .holiday_calendar.service import HolidayCalendarService
from .organizations.mysql_organization_repository import MySQLOrganizationRepository
from .organizations.service import OrganizationService
from .payroll.balance_service import HoursBalanceService
from .payroll.mysql_payroll_repository import MySQLHoursBalanceRepository, MySQLPayrollSettingsRepository
from .payroll.settings_service import PayrollSettingsService
from .reports.service import OvertimeReportService
from .requests.mysql_request_repository import MySQLAdjustmentRequestRepository, MySQLVacationRequestRepository
from .requests.service import AdjustmentRequestService
from .requests.vacation_service import VacationService
from .schedules.mysql_schedule_repository import MySQLScheduleAdjustmentRepository, MySQLWorkScheduleRepository
from .schedules.service import ScheduleAdjustmentService, WorkScheduleService
from .time_records.factory import PunchStrategyFactory
from .time_records.mysql_time_record_repository import MySQLTimeRecordRepository
from .time_records.service import TimeRecordService
from .users.mysql_user_repository import MySQLUserRepository
from .users.service import AuthService, EmployeeService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    users_repo: MySQLUserRepository
    organizations_repo: MySQLOrganizationRepository
    schedules_repo: MySQLWorkScheduleRepository
    schedule_adjustments_repo: MySQLScheduleAdjustmentRepository
    time_records_repo: MySQLTimeRecordRepository
    holidays_repo: MySQLHolidayRepository
    payroll_settings_repo: MySQLPayrollSettingsRepository
    balances_repo: MySQLHoursBalanceRepository
    decisions_repo: MySQLDecisionRepository
    adjustment_requests_repo: MySQLAdjustmentRequestRepository
    vacations_repo: MySQLVacationRequestRepository
    documents_repo: MySQLDocumentRepository

    organization_service: OrganizationService
    auth_service: AuthService
    employee_service: EmployeeService
    schedule_service: WorkScheduleService
    schedule_adjustment_service: ScheduleAdjustmentService
    holiday_service: HolidayCalendarService
    payroll_settings_service: PayrollSettingsService
    time_record_service: TimeRecordService
    balance_service: HoursBalanceService
    closing_service: MonthlyClosingService
    adjustment_request_service: AdjustmentRequestService
    vacation_service: VacationService
    document_service: DocumentService
    overtime_report_service: OvertimeReportService


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    users_repo = MySQLUserRepository(conn)
    organizations_repo = MySQLOrganizationRepository(conn)
    schedules_repo = MySQLWorkScheduleRepository(conn)
    schedule_adjustments_repo = MySQLScheduleAdjustmentRepository(conn)
    time_records_repo = MySQLTimeRecordRepository(conn)
    holidays_repo = MySQLHolidayRepository(conn)
    payroll_settings_repo = MySQLPayrollSettingsRepository(conn)
    balances_repo = MySQLHoursBalanceRepository(conn)
    decisions_repo = MySQLDecisionRepository(conn)
    adjustment_requests_repo = MySQLAdjustmentRequestRepository(conn)
    vacations_repo = MySQLVacationRequestRepository(conn)
    documents_repo = MySQLDocumentRepository(conn)

    organization_service = OrganizationService(organizations_repo)
    auth_service = AuthService(users_repo, organization_service)
    employee_service = EmployeeService(users_repo, schedules_repo)
    schedule_service = WorkScheduleService(schedules_repo, users_repo)
    schedule_adjustment_service = ScheduleAdjustmentService(schedule_adjustments_repo, users_repo)
    holiday_service = HolidayCalendarService(holidays_repo, organizations_repo)
    payroll_settings_service = PayrollSettingsService(payroll_settings_repo)
    time_record_service = TimeRecordService(
        time_records_repo,
        users_repo,
        schedules_repo,
        schedule_adjustment_service,
        payroll_settings_service,
        strategy_factory=PunchStrategyFactory(),
    )
    balance_service = HoursBalanceService(
        balances_repo,
        time_records_repo,
        users_repo,
        schedules_repo,
        holiday_service,
        payroll_settings_service,
        vacations_repo,
        adjustment_requests_repo,
    )
    closing_service = MonthlyClosingService(decisions_repo, balances_repo, users_repo, payroll_settings_service)
    adjustment_request_service = AdjustmentRequestService(adjustment_requests_repo, time_records_repo, users_repo)
    vacation_service = VacationService(vacations_repo, users_repo)
    document_service = DocumentService(documents_repo, users_repo)
    overtime_report_service = OvertimeReportService(decisions_repo, balances_repo, users_repo)

    return Container(
        conn=conn,
        users_repo=users_repo,
        organizations_repo=organizations_repo,
        schedules_repo=schedules_repo,
        schedule_adjustments_repo=schedule_adjustments_repo,
        time_records_repo=time_records_repo,
        holidays_repo=holidays_repo,
        payroll_settings_repo=payroll_settings_repo,
        balances_repo=balances_repo,
        decisions_repo=decisions_repo,
        adjustment_requests_repo=adjustment_requests_repo,
        vacations_repo=vacations_repo,
        documents_repo=documents_repo,
        organization_service=organization_service,
        auth_service=auth_service,
        employee_service=employee_service,
        schedule_service=schedule_service,
        schedule_adjustment_service=schedule_adjustment_service,
        holiday_service=holiday_service,
        payroll_settings_service=payroll_settings_service,
        time_record_service=time_record_service,
        balance_service=balance_service,
        closing_service=closing_service,
        adjustment_request_service=adjustment_request_service,
        vacation_service=vacation_service,
        document_service=document_service,
        overtime_report_service=overtime_report_service,
    )
