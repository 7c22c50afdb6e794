"""Arabic / English message catalog for API errors."""

DEFAULT_LANGUAGE = "en"
SUPPORTED_LANGUAGES = ("en", "ar")

MESSAGES = {
    "client_not_found": {"en": "Client not found", "ar": "العميل غير موجود"},
    "case_not_found": {"en": "Case not found", "ar": "القضية غير موجودة"},
    "case_number_taken": {"en": "Case number already exists", "ar": "رقم القضية مستخدم مسبقًا"},
    "document_not_found": {"en": "Document not found", "ar": "المستند غير موجود"},
    "task_not_found": {"en": "Task not found", "ar": "المهمة غير موجودة"},
    "time_entry_not_found": {"en": "Time entry not found", "ar": "سجل الوقت غير موجود"},
    "expense_not_found": {"en": "Expense not found", "ar": "المصروف غير موجود"},
    "invoice_not_found": {"en": "Invoice not found", "ar": "الفاتورة غير موجودة"},
    "event_not_found": {"en": "Event not found", "ar": "الموعد غير موجود"},
    "notification_not_found": {"en": "Notification not found", "ar": "الإشعار غير موجود"},
    "template_not_found": {"en": "Template not found", "ar": "القالب غير موجود"},
    "extraction_not_found": {"en": "Extraction not found", "ar": "نتيجة الاستخراج غير موجودة"},
    "message_not_found": {"en": "Message not found", "ar": "الرسالة غير موجودة"},
    "shared_document_not_found": {"en": "Shared document not found", "ar": "المستند المشترك غير موجود"},
    "share_expired": {"en": "Share link has expired", "ar": "انتهت صلاحية رابط المشاركة"},
    "share_password_required": {"en": "Password required", "ar": "كلمة المرور مطلوبة"},
    "share_password_invalid": {"en": "Invalid password", "ar": "كلمة المرور غير صحيحة"},
    "share_permission_denied": {
        "en": "This link does not allow downloading",
        "ar": "هذا الرابط لا يسمح بالتنزيل",
    },
    "invalid_credentials": {
        "en": "Invalid email or password",
        "ar": "البريد الإلكتروني أو كلمة المرور غير صحيحة",
    },
    "invalid_invite_token": {
        "en": "Invalid or expired invitation token",
        "ar": "رمز الدعوة غير صالح أو منتهي الصلاحية",
    },
    "invite_token_expired": {"en": "Invitation token has expired", "ar": "انتهت صلاحية رمز الدعوة"},
    "portal_already_active": {
        "en": "Client already has active portal access",
        "ar": "العميل لديه وصول نشط إلى البوابة بالفعل",
    },
    "portal_access_not_found": {
        "en": "Client has no portal access",
        "ar": "لا يملك العميل وصولًا إلى البوابة",
    },
    "portal_email_in_use": {
        "en": "Another client with this email already has active portal access",
        "ar": "يوجد عميل آخر بنفس البريد الإلكتروني لديه وصول نشط إلى البوابة",
    },
    "client_email_missing": {
        "en": "Client has no email address",
        "ar": "لا يوجد بريد إلكتروني للعميل",
    },
    "invalid_status_transition": {
        "en": "Invoice cannot move from this status to the requested one",
        "ar": "لا يمكن نقل الفاتورة من حالتها الحالية إلى الحالة المطلوبة",
    },
    "negative_invoice_total": {
        "en": "Discount cannot exceed subtotal plus tax",
        "ar": "لا يمكن أن يتجاوز الخصم المجموع الفرعي مع الضريبة",
    },
    "invalid_date_range": {
        "en": "End date must not be before start date",
        "ar": "يجب ألا يسبق تاريخ الانتهاء تاريخ البدء",
    },
    "file_too_large": {"en": "File too large", "ar": "حجم الملف كبير جدًا"},
    "no_file_provided": {"en": "No file provided", "ar": "لم يتم إرفاق ملف"},
    "file_type_not_allowed": {"en": "File type not allowed", "ar": "نوع الملف غير مسموح به"},
    "invalid_receipt": {"en": "Receipt data is not valid base64", "ar": "بيانات الإيصال غير صالحة"},
    "email_already_registered": {"en": "Email already registered", "ar": "البريد الإلكتروني مسجل مسبقًا"},
    "not_authenticated": {"en": "Could not validate credentials", "ar": "تعذر التحقق من بيانات الاعتماد"},
    "account_inactive": {"en": "Account is not active", "ar": "الحساب غير نشط"},
    "insufficient_permissions": {"en": "Insufficient permissions", "ar": "صلاحيات غير كافية"},
    "ai_service_error": {"en": "AI service error", "ar": "خطأ في خدمة الذكاء الاصطناعي"},
    "ai_invalid_response": {
        "en": "AI service returned an invalid response",
        "ar": "أعادت خدمة الذكاء الاصطناعي استجابة غير صالحة",
    },
}


def _quality(params) -> float:
    for param in params:
        name, _, value = param.partition("=")
        if name.strip().lower() == "q":
            try:
                return float(value)
            except ValueError:
                return 0.0
    return 1.0


def resolve_language(accept_language):
    """Pick the highest weighted supported language from an Accept-Language header."""
    if not accept_language:
        return DEFAULT_LANGUAGE
    ranked = []
    for part in accept_language.split(","):
        tag, *params = part.split(";")
        code = tag.strip().lower()[:2]
        quality = _quality(params)
        if code in SUPPORTED_LANGUAGES and quality > 0:
            ranked.append((quality, code))
    if not ranked:
        return DEFAULT_LANGUAGE
    # sort is stable, so equal weights keep header order
    ranked.sort(key=lambda item: item[0], reverse=True)
    return ranked[0][1]


def translate(key: str, language: str = DEFAULT_LANGUAGE) -> str:
    entry = MESSAGES.get(key)
    if entry is None:
        return key
    return entry.get(language) or entry[DEFAULT_LANGUAGE]
