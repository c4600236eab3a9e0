"""
Pydantic request/response models for the HTTP API.

JSON uses camelCase (customerId, subTotal, ...); Python code uses the
snake_case field names. Request models are dumped with exclude_unset=True so
repositories can tell "not sent" from "sent as null".
"""
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class APIModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Ref(APIModel):
    """Nested reference such as {"customer": {"id": "..."}}."""
    id: Optional[str] = None


# ---------------- Parties ----------------

class CustomerIn(APIModel):
    id: Optional[str] = None
    name: Optional[str] = None
    company: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None


class CustomerOut(CustomerIn):
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class VendorIn(APIModel):
    id: Optional[str] = None
    name: Optional[str] = None
    contact_person: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    bank_details: Optional[str] = None
    payment_terms: Optional[str] = None


class VendorOut(VendorIn):
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class EmployeeIn(APIModel):
    id: Optional[str] = None
    name: Optional[str] = None
    employee_id: Optional[str] = None
    role: Optional[str] = None
    payment_type: Optional[str] = None
    hourly_rate: Optional[float] = Field(default=None, ge=0)
    salary: Optional[float] = Field(default=None, ge=0)
    overtime_rate: Optional[float] = Field(default=None, ge=0)
    bank_details: Optional[str] = None


class EmployeeOut(EmployeeIn):
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


# ---------------- Fleet ----------------

class VehicleIn(APIModel):
    id: Optional[str] = None
    vehicle_number: Optional[str] = None
    vehicle_type: Optional[str] = None
    make: Optional[str] = None
    model: Optional[str] = None
    year: Optional[int] = None
    color: Optional[str] = None
    purchase_price: Optional[float] = None
    purchase_date: Optional[str] = None
    current_value: Optional[float] = None
    insurance_cost_monthly: Optional[float] = None
    financing_cost_monthly: Optional[float] = None
    odometer_reading: Optional[float] = None
    last_service_date: Optional[str] = None
    next_service_due: Optional[str] = None
    fuel_type: Optional[str] = None
    status: Optional[str] = None
    registration_expiry: Optional[str] = None
    insurance_expiry: Optional[str] = None
    description: Optional[str] = None
    base_price: Optional[float] = None
    notes: Optional[str] = None


class VehicleOut(VehicleIn):
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class VehicleTransactionIn(APIModel):
    id: Optional[str] = None
    vehicle_id: Optional[str] = None
    vehicle: Optional[Ref] = None
    transaction_type: Optional[str] = None
    category: Optional[str] = None
    amount: Optional[float] = None
    date: Optional[str] = None
    description: Optional[str] = None
    employee_id: Optional[str] = None
    invoice_id: Optional[str] = None
    purchase_order_id: Optional[str] = None
    quote_id: Optional[str] = None


class VehicleTransactionOut(APIModel):
    id: str
    vehicle_id: str
    transaction_type: str
    category: Optional[str] = None
    amount: float
    date: str
    month: str
    description: Optional[str] = None
    employee_id: Optional[str] = None
    invoice_id: Optional[str] = None
    purchase_order_id: Optional[str] = None
    quote_id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class ExpenseCategoryIn(APIModel):
    id: Optional[str] = None
    name: Optional[str] = None


class ExpenseCategoryOut(APIModel):
    id: str
    name: str
    is_custom: bool
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


# ---------------- Documents ----------------

class LineItemIn(APIModel):
    id: Optional[str] = None
    vehicle_type_id: Optional[str] = None
    vehicle_type_label: Optional[str] = None
    vehicle_number: Optional[str] = None
    description: Optional[str] = None
    rental_basis: Optional[str] = None
    quantity: Optional[float] = Field(default=0, ge=0)
    unit_price: Optional[float] = Field(default=0, ge=0)
    tax_percent: Optional[float] = Field(default=0, ge=0, le=100)


class LineItemOut(APIModel):
    id: str
    serial_number: Optional[int] = None
    vehicle_type_id: Optional[str] = None
    vehicle_type_label: Optional[str] = None
    vehicle_number: Optional[str] = None
    description: Optional[str] = None
    rental_basis: Optional[str] = None
    quantity: float
    unit_price: float
    tax_percent: float
    gross_amount: float
    line_tax_amount: float
    line_total: float


class QuoteIn(APIModel):
    id: Optional[str] = None
    number: Optional[str] = None
    date: Optional[str] = None
    valid_until: Optional[str] = None
    currency: Optional[str] = None
    customer_id: Optional[str] = None
    customer: Optional[Ref] = None
    terms: Optional[str] = None
    notes: Optional[str] = None
    items: List[LineItemIn] = []


class QuoteOut(APIModel):
    id: str
    number: str
    date: str
    valid_until: Optional[str] = None
    currency: Optional[str] = None
    customer_id: Optional[str] = None
    sub_total: float
    total_tax: float
    total: float
    terms: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    items: List[LineItemOut] = []


class PurchaseOrderIn(APIModel):
    id: Optional[str] = None
    number: Optional[str] = None
    date: Optional[str] = None
    vendor_id: Optional[str] = None
    vendor: Optional[Ref] = None
    currency: Optional[str] = None
    status: Optional[str] = None
    terms: Optional[str] = None
    notes: Optional[str] = None
    items: List[LineItemIn] = []


class PurchaseOrderOut(APIModel):
    id: str
    number: str
    date: str
    vendor_id: str
    subtotal: float
    tax: float
    amount: float
    currency: Optional[str] = None
    status: str
    terms: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    items: List[LineItemOut] = []


class InvoiceIn(APIModel):
    id: Optional[str] = None
    number: Optional[str] = None
    date: Optional[str] = None
    due_date: Optional[str] = None
    customer_id: Optional[str] = None
    customer: Optional[Ref] = None
    vendor_id: Optional[str] = None
    purchase_order_id: Optional[str] = None
    quote_id: Optional[str] = None
    tax_override: Optional[float] = Field(default=None, ge=0)
    amount_received: Optional[float] = Field(default=None, ge=0)
    status: Optional[str] = None
    terms: Optional[str] = None
    notes: Optional[str] = None
    items: List[LineItemIn] = []


class InvoiceOut(APIModel):
    id: str
    number: str
    date: str
    due_date: Optional[str] = None
    customer_id: str
    vendor_id: Optional[str] = None
    purchase_order_id: Optional[str] = None
    quote_id: Optional[str] = None
    subtotal: float
    tax: float
    tax_override: Optional[float] = None
    total: float
    amount_received: float
    status: str
    terms: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    items: List[LineItemOut] = []


class NextNumberOut(APIModel):
    number: str


# ---------------- Payroll ----------------

class PayslipIn(APIModel):
    id: Optional[str] = None
    employee_id: Optional[str] = None
    employee: Optional[Ref] = None
    month: Optional[str] = None
    year: Optional[int] = None
    base_salary: Optional[float] = None
    overtime_hours: Optional[float] = None
    overtime_rate: Optional[float] = None
    overtime_pay: Optional[float] = None
    deductions: Optional[float] = None
    deduction_remarks: Optional[str] = None
    net_pay: Optional[float] = None
    status: Optional[str] = None
    notes: Optional[str] = None


class PayslipOut(APIModel):
    id: str
    employee_id: str
    month: str
    year: Optional[int] = None
    base_salary: float
    overtime_hours: float
    overtime_rate: float
    overtime_pay: float
    deductions: float
    deduction_remarks: Optional[str] = None
    net_pay: float
    status: str
    notes: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


# ---------------- Settings ----------------

class AdminSettingsIn(APIModel):
    company_name: Optional[str] = None
    address: Optional[str] = None
    vat_number: Optional[str] = None
    logo_url: Optional[str] = None
    seal_url: Optional[str] = None
    signature_url: Optional[str] = None
    quote_number_pattern: Optional[str] = None
    currency: Optional[str] = None
    default_terms: Optional[str] = None
    default_invoice_terms: Optional[str] = None
    default_purchase_order_terms: Optional[str] = None
    footer_address_english: Optional[str] = None
    footer_address_arabic: Optional[str] = None
    footer_contact_english: Optional[str] = None
    footer_contact_arabic: Optional[str] = None
    quote_starting_number: Optional[int] = Field(default=None, ge=1)
    invoice_starting_number: Optional[int] = Field(default=None, ge=1)
    show_revenue_trend: Optional[bool] = None
    show_quick_actions: Optional[bool] = None
    show_reports: Optional[bool] = None
    show_vehicle_finances: Optional[bool] = None
    show_quotations_invoices_card: Optional[bool] = None
    show_quotations_two_pane: Optional[bool] = None
    show_purchase_orders_two_pane: Optional[bool] = None
    show_invoices_two_pane: Optional[bool] = None
    show_employee_salaries_card: Optional[bool] = None
    show_vehicle_revenue_expenses_card: Optional[bool] = None
    show_activity_this_month: Optional[bool] = None
    show_financial_health: Optional[bool] = None
    show_business_overview: Optional[bool] = None
    show_top_customers: Optional[bool] = None
    show_activity_summary: Optional[bool] = None


class AdminSettingsOut(AdminSettingsIn):
    id: str
    quote_number_pattern: str
    currency: str
    quote_starting_number: int
    invoice_starting_number: int
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


# ---------------- Reporting ----------------

class MonthSummary(APIModel):
    month: str
    total_revenue: float
    total_expenses: float
    profit: float
    transaction_count: int


class VehicleProfitabilityOut(APIModel):
    vehicle_id: str
    vehicle_number: str
    current_month: MonthSummary
    last_month: MonthSummary
    months: List[MonthSummary]
    history: List[MonthSummary]
    all_time_revenue: float
    all_time_expenses: float
    all_time_profit: float


class Period(APIModel):
    month: str
    revenue: float
    expenses: float
    profit: float


class Totals(APIModel):
    revenue: float
    expenses: float
    profit: float


class OverallMetrics(APIModel):
    total_revenue: float
    total_expenses: float
    net_profit: float
    profit_margin: float
    avg_revenue_per_vehicle: float
    avg_profit_per_vehicle: float
    total_transactions: int
    avg_transaction_value: float


class TimeBasedMetrics(APIModel):
    current_month: Period
    last_month: Period
    mom_growth: Totals
    ytd: Totals
    monthly_trend: List[Period]


class VehicleRank(APIModel):
    vehicle_id: str
    vehicle_number: str
    revenue: Optional[float] = None
    profit: Optional[float] = None


class VehicleBasedMetrics(APIModel):
    total_active: int
    profitable: int
    loss_making: int
    no_data: int
    top_by_revenue: List[VehicleRank]
    top_by_profit: List[VehicleRank]
    bottom_by_profit: List[VehicleRank]


class CustomerRank(APIModel):
    customer_id: str
    customer_name: str
    revenue: float


class CustomerBasedMetrics(APIModel):
    total_unique: int
    top_by_revenue: List[CustomerRank]
    avg_revenue_per_customer: float


class CategoryBasedMetrics(APIModel):
    revenue_by_category: Dict[str, float]
    expenses_by_category: Dict[str, float]
    top_expense_category: str


class MostActiveVehicle(APIModel):
    vehicle_id: str
    vehicle_number: str
    transaction_count: int


class OperationalMetrics(APIModel):
    revenue_per_vehicle_per_month: float
    expense_ratio: float
    most_active_vehicle: MostActiveVehicle
    avg_transactions_per_vehicle: float


class DashboardMetricsOut(APIModel):
    overall: OverallMetrics
    time_based: TimeBasedMetrics
    vehicle_based: VehicleBasedMetrics
    customer_based: CustomerBasedMetrics
    category_based: CategoryBasedMetrics
    operational: OperationalMetrics


class DeletedOut(APIModel):
    success: bool = True


class HealthOut(APIModel):
    status: str
    database: bool
    version: str


class UploadOut(APIModel):
    path: str
