"""
Static translation table for the site.

Each key maps to one string per locale. Lookups fall back to English and then
to the key itself, so a missing entry never breaks a response.
"""
from typing import Dict, List, Mapping, Optional

FALLBACK_LOCALE = "en"

LANGUAGES: List[dict] = [
    {"code": "ar", "name": "Arabic", "nativeName": "العربية", "dir": "rtl", "flag": "🇸🇦"},
    {"code": "en", "name": "English", "nativeName": "English", "dir": "ltr", "flag": "🇺🇸"},
    {"code": "fr", "name": "French", "nativeName": "Français", "dir": "ltr", "flag": "🇫🇷"},
]

SUPPORTED_LOCALES = tuple(lang["code"] for lang in LANGUAGES)

TRANSLATIONS: Dict[str, Dict[str, str]] = {
    # Navigation
    "nav.home": {"ar": "الرئيسية", "en": "Home", "fr": "Accueil"},
    "nav.about": {"ar": "حولنا", "en": "About", "fr": "À propos"},
    "nav.contact": {"ar": "اتصل بنا", "en": "Contact", "fr": "Contact"},
    "nav.dashboard": {"ar": "لوحة التحكم", "en": "Dashboard", "fr": "Tableau de bord"},
    "nav.login": {"ar": "تسجيل الدخول", "en": "Login", "fr": "Connexion"},
    "nav.logout": {"ar": "تسجيل الخروج", "en": "Logout", "fr": "Déconnexion"},

    # Home
    "home.title": {"ar": "متجر التطبيقات", "en": "App Store", "fr": "Magasin d'applications"},
    "home.subtitle": {
        "ar": "اكتشف وحمّل أفضل التطبيقات",
        "en": "Discover and download the best apps",
        "fr": "Découvrez et téléchargez les meilleures applications",
    },
    "home.featuredApps": {"ar": "التطبيقات المميزة", "en": "Featured Apps", "fr": "Applications en vedette"},
    "home.download": {"ar": "تحميل", "en": "Download", "fr": "Télécharger"},
    "home.downloads": {"ar": "التحميلات", "en": "Downloads", "fr": "Téléchargements"},
    "home.version": {"ar": "الإصدار", "en": "Version", "fr": "Version"},
    "home.size": {"ar": "الحجم", "en": "Size", "fr": "Taille"},
    "home.rating": {"ar": "التقييم", "en": "Rating", "fr": "Évaluation"},
    "home.lastUpdated": {"ar": "آخر تحديث", "en": "Last Updated", "fr": "Dernière mise à jour"},
    "home.loadError": {
        "ar": "خطأ في تحميل التطبيقات",
        "en": "Error loading apps",
        "fr": "Erreur lors du chargement des applications",
    },

    # About
    "about.title": {"ar": "حول الموقع", "en": "About Us", "fr": "À propos de nous"},
    "about.description": {
        "ar": "منصة حديثة لتوزيع التطبيقات مع أحدث التقنيات",
        "en": "A modern platform for app distribution with cutting-edge technology",
        "fr": "Une plateforme moderne de distribution d'applications avec une technologie de pointe",
    },

    # Contact
    "contact.title": {"ar": "اتصل بنا", "en": "Contact Us", "fr": "Contactez-nous"},
    "contact.subtitle": {"ar": "نحن هنا لمساعدتك", "en": "We're here to help", "fr": "Nous sommes là pour vous aider"},
    "contact.name": {"ar": "الاسم", "en": "Name", "fr": "Nom"},
    "contact.email": {"ar": "البريد الإلكتروني", "en": "Email", "fr": "E-mail"},
    "contact.message": {"ar": "الرسالة", "en": "Message", "fr": "Message"},
    "contact.send": {"ar": "إرسال", "en": "Send", "fr": "Envoyer"},
    "contact.sending": {"ar": "جاري الإرسال...", "en": "Sending...", "fr": "Envoi en cours..."},
    "contact.success": {
        "ar": "تم إرسال الرسالة بنجاح!",
        "en": "Message sent successfully!",
        "fr": "Message envoyé avec succès!",
    },
    "contact.error": {"ar": "حدث خطأ أثناء الإرسال", "en": "Error sending message", "fr": "Erreur lors de l'envoi"},

    # Login
    "login.title": {"ar": "تسجيل الدخول", "en": "Login", "fr": "Connexion"},
    "login.email": {"ar": "البريد الإلكتروني", "en": "Email", "fr": "E-mail"},
    "login.password": {"ar": "كلمة المرور", "en": "Password", "fr": "Mot de passe"},
    "login.submit": {"ar": "دخول", "en": "Sign In", "fr": "Se connecter"},
    "login.loading": {"ar": "جاري تسجيل الدخول...", "en": "Signing in...", "fr": "Connexion en cours..."},
    "login.error": {"ar": "خطأ في تسجيل الدخول", "en": "Login error", "fr": "Erreur de connexion"},
    "login.success": {"ar": "تم تسجيل الدخول بنجاح!", "en": "Signed in successfully!", "fr": "Connexion réussie !"},
    "login.userNotFound": {
        "ar": "البريد الإلكتروني غير موجود",
        "en": "No account found for this email",
        "fr": "Aucun compte pour cet e-mail",
    },
    "login.wrongPassword": {"ar": "كلمة المرور غير صحيحة", "en": "Incorrect password", "fr": "Mot de passe incorrect"},
    "login.invalidEmail": {"ar": "البريد الإلكتروني غير صالح", "en": "Invalid email address", "fr": "Adresse e-mail invalide"},
    "login.tooManyRequests": {
        "ar": "تم تجاوز عدد المحاولات المسموح، حاول مرة أخرى لاحقاً",
        "en": "Too many attempts, please try again later",
        "fr": "Trop de tentatives, réessayez plus tard",
    },
    "login.notAuthorized": {
        "ar": "ليس لديك صلاحية الوصول إلى لوحة التحكم",
        "en": "You are not authorized to access the dashboard",
        "fr": "Vous n'êtes pas autorisé à accéder au tableau de bord",
    },
    "logout.success": {"ar": "تم تسجيل الخروج بنجاح", "en": "Signed out successfully", "fr": "Déconnexion réussie"},

    # Dashboard
    "dashboard.title": {"ar": "لوحة التحكم", "en": "Dashboard", "fr": "Tableau de bord"},
    "dashboard.welcome": {"ar": "مرحباً بك", "en": "Welcome", "fr": "Bienvenue"},
    "dashboard.stats": {"ar": "الإحصائيات", "en": "Statistics", "fr": "Statistiques"},
    "dashboard.apps": {"ar": "التطبيقات", "en": "Apps", "fr": "Applications"},
    "dashboard.users": {"ar": "المستخدمون", "en": "Users", "fr": "Utilisateurs"},
    "dashboard.messages": {"ar": "الرسائل", "en": "Messages", "fr": "Messages"},
    "dashboard.settings": {"ar": "الإعدادات", "en": "Settings", "fr": "Paramètres"},
    "dashboard.maintenance": {"ar": "وضع الصيانة", "en": "Maintenance Mode", "fr": "Mode maintenance"},
    "dashboard.analytics": {"ar": "التحليلات", "en": "Analytics", "fr": "Analyses"},
    "dashboard.logs": {"ar": "السجلات", "en": "Logs", "fr": "Journaux"},
    "dashboard.loadError": {
        "ar": "خطأ في تحميل بيانات لوحة التحكم",
        "en": "Error loading dashboard data",
        "fr": "Erreur lors du chargement du tableau de bord",
    },

    # Maintenance
    "maintenance.title": {"ar": "الموقع قيد الصيانة", "en": "Site Under Maintenance", "fr": "Site en maintenance"},
    "maintenance.subtitle": {"ar": "سنعود قريباً", "en": "We'll be back soon", "fr": "Nous reviendrons bientôt"},
    "maintenance.timeLeft": {"ar": "الوقت المتبقي", "en": "Time Remaining", "fr": "Temps restant"},
    "maintenance.days": {"ar": "أيام", "en": "Days", "fr": "Jours"},
    "maintenance.hours": {"ar": "ساعات", "en": "Hours", "fr": "Heures"},
    "maintenance.minutes": {"ar": "دقائق", "en": "Minutes", "fr": "Minutes"},
    "maintenance.seconds": {"ar": "ثواني", "en": "Seconds", "fr": "Secondes"},
    "maintenance.defaultMessage": {
        "ar": "الموقع قيد الصيانة، سنعود قريباً",
        "en": "Site under maintenance, we'll be back soon",
        "fr": "Site en maintenance, nous reviendrons bientôt",
    },

    # Common
    "common.save": {"ar": "حفظ", "en": "Save", "fr": "Enregistrer"},
    "common.cancel": {"ar": "إلغاء", "en": "Cancel", "fr": "Annuler"},
    "common.delete": {"ar": "حذف", "en": "Delete", "fr": "Supprimer"},
    "common.edit": {"ar": "تعديل", "en": "Edit", "fr": "Modifier"},
    "common.add": {"ar": "إضافة", "en": "Add", "fr": "Ajouter"},
    "common.loading": {"ar": "جاري التحميل...", "en": "Loading...", "fr": "Chargement..."},
    "common.error": {"ar": "خطأ", "en": "Error", "fr": "Erreur"},
    "common.success": {"ar": "نجح", "en": "Success", "fr": "Succès"},
    "common.confirm": {"ar": "تأكيد", "en": "Confirm", "fr": "Confirmer"},
    "common.close": {"ar": "إغلاق", "en": "Close", "fr": "Fermer"},

    # Footer
    "footer.copyright": {"ar": "جميع الحقوق محفوظة", "en": "All rights reserved", "fr": "Tous droits réservés"},
    "footer.followUs": {"ar": "تابعنا", "en": "Follow Us", "fr": "Suivez-nous"},

    # Stats
    "stats.totalDownloads": {"ar": "إجمالي التحميلات", "en": "Total Downloads", "fr": "Téléchargements totaux"},
    "stats.totalVisitors": {"ar": "إجمالي الزوار", "en": "Total Visitors", "fr": "Visiteurs totaux"},
    "stats.thisMonth": {"ar": "هذا الشهر", "en": "This Month", "fr": "Ce mois"},
    "stats.lastMonth": {"ar": "الشهر الماضي", "en": "Last Month", "fr": "Le mois dernier"},

    # Errors returned by the API
    "errors.requiredFields": {
        "ar": "يرجى ملء جميع الحقول المطلوبة",
        "en": "Please fill in all required fields",
        "fr": "Veuillez remplir tous les champs obligatoires",
    },
    "errors.invalidEmail": {"ar": "البريد الإلكتروني غير صالح", "en": "Invalid email address", "fr": "Adresse e-mail invalide"},
    "errors.invalidValue": {"ar": "قيمة غير صالحة", "en": "Invalid value", "fr": "Valeur invalide"},
    "errors.notFound": {"ar": "العنصر غير موجود", "en": "Not found", "fr": "Introuvable"},
    "errors.notAuthenticated": {
        "ar": "يجب تسجيل الدخول أولاً",
        "en": "Authentication required",
        "fr": "Authentification requise",
    },
    "errors.notAuthorized": {
        "ar": "ليس لديك صلاحية للقيام بهذا الإجراء",
        "en": "You are not authorized to perform this action",
        "fr": "Vous n'êtes pas autorisé à effectuer cette action",
    },
    "errors.unsupportedLocale": {"ar": "لغة غير مدعومة", "en": "Unsupported language", "fr": "Langue non prise en charge"},
    "errors.invalidWindow": {
        "ar": "يجب أن يكون وقت الانتهاء بعد وقت البدء",
        "en": "End time must be after start time",
        "fr": "L'heure de fin doit être postérieure à l'heure de début",
    },
    "errors.unknown": {"ar": "حدث خطأ غير متوقع", "en": "An unexpected error occurred", "fr": "Une erreur inattendue s'est produite"},

    # Mutation notifications
    "notify.maintenanceEnabled": {"ar": "تم تفعيل وضع الصيانة", "en": "Maintenance mode enabled", "fr": "Mode maintenance activé"},
    "notify.maintenanceDisabled": {"ar": "تم إلغاء وضع الصيانة", "en": "Maintenance mode disabled", "fr": "Mode maintenance désactivé"},
    "notify.maintenanceSaved": {
        "ar": "تم حفظ إعدادات الصيانة",
        "en": "Maintenance settings saved",
        "fr": "Paramètres de maintenance enregistrés",
    },
    "notify.maintenanceError": {
        "ar": "حدث خطأ أثناء تغيير حالة الصيانة",
        "en": "Error changing maintenance mode",
        "fr": "Erreur lors du changement du mode maintenance",
    },
    "notify.settingsSaved": {"ar": "تم حفظ إعدادات الموقع", "en": "Site settings saved", "fr": "Paramètres du site enregistrés"},
    "notify.settingsError": {
        "ar": "حدث خطأ أثناء حفظ الإعدادات",
        "en": "Error saving settings",
        "fr": "Erreur lors de l'enregistrement des paramètres",
    },
    "notify.appSaved": {"ar": "تم حفظ التطبيق", "en": "App saved", "fr": "Application enregistrée"},
    "notify.appError": {
        "ar": "حدث خطأ أثناء حفظ التطبيق",
        "en": "Error saving app",
        "fr": "Erreur lors de l'enregistrement de l'application",
    },
    "notify.messageUpdated": {"ar": "تم تحديث الرسالة", "en": "Message updated", "fr": "Message mis à jour"},
    "notify.messageError": {
        "ar": "حدث خطأ أثناء تحديث الرسالة",
        "en": "Error updating message",
        "fr": "Erreur lors de la mise à jour du message",
    },
}


def get_translation(key: str, locale: str) -> str:
    """Look up `key` for `locale`, falling back to English, then to the key."""
    entry = TRANSLATIONS.get(key)
    if not entry:
        return key
    return entry.get(locale) or entry.get(FALLBACK_LOCALE) or key


def get_language(code: Optional[str]) -> dict:
    """Language descriptor for `code`; unknown codes get the first language."""
    for lang in LANGUAGES:
        if lang["code"] == code:
            return lang
    return LANGUAGES[0]


def is_rtl(code: Optional[str]) -> bool:
    return get_language(code)["dir"] == "rtl"


def normalize_locale(value: Optional[str]) -> Optional[str]:
    """Reduce `fr-FR`, `AR_ma`, ... to a supported code, or None."""
    raw = str(value or "").strip().lower()
    if not raw:
        return None
    code = raw.replace("_", "-").split("-", 1)[0]
    if code in SUPPORTED_LOCALES:
        return code
    return None


def localized_value(values: Optional[Mapping[str, str]], locale: str, default_locale: str = FALLBACK_LOCALE) -> str:
    """
    Read a localized field map (e.g. AboutContent.title).

    Tries `locale`, then `default_locale`, then English, then any non-empty
    value. Returns "" when the map is empty or missing.
    """
    if not values:
        return ""
    for code in (locale, default_locale, FALLBACK_LOCALE):
        text = values.get(code)
        if text:
            return text
    for text in values.values():
        if text:
            return text
    return ""
