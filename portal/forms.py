import re

from django import forms

from .schedule import parse_clock
from .session import ROLES

GENDERS = ("Erkek", "Kadın", "Diğer")
PHONE_RE = re.compile(r"^[0-9+\-()\s]{10,}$")
TC_RE = re.compile(r"^\d{11}$")


# ───────────────────────────────────────────────────────────────────────────────
# Giriş / Kayıt
# ───────────────────────────────────────────────────────────────────────────────

class LoginForm(forms.Form):
    email = forms.EmailField(error_messages={
        "required": "Email adresi gereklidir",
        "invalid": "Geçerli bir email adresi giriniz",
    })
    password = forms.CharField(widget=forms.PasswordInput, min_length=5, strip=False, error_messages={
        "required": "Şifre gereklidir",
        "min_length": "Şifre en az 5 karakter olmalıdır",
    })


class RegisterForm(forms.Form):
    full_name = forms.CharField(min_length=2, error_messages={
        "required": "Ad Soyad gereklidir",
        "min_length": "Ad Soyad en az 2 karakter olmalıdır",
    })
    email = forms.EmailField(error_messages={
        "required": "Email adresi gereklidir",
        "invalid": "Geçerli bir email adresi giriniz",
    })
    password = forms.CharField(widget=forms.PasswordInput, min_length=5, max_length=50, strip=False, error_messages={
        "required": "Şifre gereklidir",
        "min_length": "Şifre en az 5 karakter olmalıdır",
        "max_length": "Şifre en fazla 50 karakter olabilir",
    })


# ───────────────────────────────────────────────────────────────────────────────
# Profil
# ───────────────────────────────────────────────────────────────────────────────

class ProfileForm(forms.Form):
    full_name = forms.CharField(label="Ad Soyad", required=False)
    phone_number = forms.CharField(label="Telefon", error_messages={"required": "Telefon zorunludur"})
    tc_kimlik_no = forms.CharField(label="TC Kimlik No", error_messages={"required": "TC Kimlik No zorunludur"})
    gender = forms.ChoiceField(
        label="Cinsiyet",
        choices=[("", "Seçiniz")] + [(g, g) for g in GENDERS],
        error_messages={"required": "Cinsiyet zorunludur", "invalid_choice": "Geçersiz cinsiyet değeri."},
    )
    address = forms.CharField(label="Adres", widget=forms.Textarea(attrs={"rows": 3}), error_messages={"required": "Adres zorunludur"})
    height_cm = forms.IntegerField(label="Boy (cm)", required=False)
    weight_kg = forms.IntegerField(label="Kilo (kg)", required=False)

    def clean_phone_number(self):
        phone = self.cleaned_data["phone_number"].strip()
        if not PHONE_RE.match(phone):
            raise forms.ValidationError("Telefon numarası en az 10 haneli olmalıdır.")
        return phone

    def clean_tc_kimlik_no(self):
        tc = self.cleaned_data["tc_kimlik_no"].strip()
        if not TC_RE.match(tc):
            raise forms.ValidationError("TC Kimlik No 11 haneli olmalıdır.")
        return tc

    def clean_height_cm(self):
        h = self.cleaned_data.get("height_cm")
        if h is not None and h < 0:
            raise forms.ValidationError("Boy negatif olamaz.")
        return h

    def clean_weight_kg(self):
        w = self.cleaned_data.get("weight_kg")
        if w is not None and w < 0:
            raise forms.ValidationError("Kilo negatif olamaz.")
        return w

    @classmethod
    def initial_from(cls, profile: dict) -> dict:
        return {
            "full_name": profile.get("fullName") or "",
            "phone_number": profile.get("phoneNumber") or "",
            "tc_kimlik_no": profile.get("tcKimlikNo") or "",
            "gender": profile.get("gender") or "",
            "address": profile.get("address") or "",
            "height_cm": profile.get("heightCm"),
            "weight_kg": profile.get("weightKg"),
        }

    def payload(self) -> dict:
        d = self.cleaned_data
        body = {
            "phoneNumber": d["phone_number"],
            "tcKimlikNo": d["tc_kimlik_no"],
            "gender": d["gender"],
            "address": d["address"].strip(),
            "heightCm": d.get("height_cm"),
            "weightKg": d.get("weight_kg"),
        }
        full_name = (d.get("full_name") or "").strip()
        if full_name:
            body["fullName"] = full_name
        return body


# ───────────────────────────────────────────────────────────────────────────────
# Hizmet sağlayıcı parametreleri
# ───────────────────────────────────────────────────────────────────────────────

class SessionDurationForm(forms.Form):
    minutes = forms.IntegerField(min_value=5, max_value=240, error_messages={
        "required": "Seans süresi gereklidir",
        "min_value": "Seans süresi 5 ile 240 dakika arasında olmalıdır.",
        "max_value": "Seans süresi 5 ile 240 dakika arasında olmalıdır.",
    })

    def clean_minutes(self):
        m = self.cleaned_data["minutes"]
        if m % 5:
            raise forms.ValidationError("Seans süresi 5 dakikanın katı olmalıdır.")
        return m


# ───────────────────────────────────────────────────────────────────────────────
# Yönetim
# ───────────────────────────────────────────────────────────────────────────────

class DepartmentForm(forms.Form):
    name = forms.CharField(max_length=120, error_messages={"required": "Departman adı gereklidir"})

    def clean_name(self):
        name = self.cleaned_data["name"].strip()
        if not name:
            raise forms.ValidationError("Departman adı gereklidir")
        return name


class BranchForm(forms.Form):
    department_id = forms.IntegerField(error_messages={"required": "Departman seçiniz"})
    name = forms.CharField(max_length=120, error_messages={"required": "Şube adı gereklidir"})

    def clean_name(self):
        name = self.cleaned_data["name"].strip()
        if not name:
            raise forms.ValidationError("Şube adı gereklidir")
        return name


class AssignRoleForm(forms.Form):
    user_id = forms.CharField(error_messages={"required": "Kullanıcı seçiniz"})
    role = forms.ChoiceField(choices=[(r, r) for r in ROLES], error_messages={
        "required": "Rol seçiniz",
        "invalid_choice": "Geçersiz rol",
    })


class AssignProviderForm(forms.Form):
    user_id = forms.CharField(error_messages={"required": "Kullanıcı seçiniz"})
    branch_id = forms.IntegerField(error_messages={"required": "Şube seçiniz"})


# ───────────────────────────────────────────────────────────────────────────────
# Randevu
# ───────────────────────────────────────────────────────────────────────────────

class BookingForm(forms.Form):
    provider_id = forms.IntegerField()
    date = forms.DateField(input_formats=["%Y-%m-%d"])
    start = forms.TimeField(required=False, input_formats=["%H:%M:%S", "%H:%M"])
    end = forms.TimeField(required=False, input_formats=["%H:%M:%S", "%H:%M"])
    slot = forms.CharField(required=False)  # "başlangıç|bitiş", saat seçim listesinden
    notes = forms.CharField(required=False, max_length=1000)
    user_id = forms.CharField(required=False)

    def clean(self):
        cleaned = super().clean()
        slot = cleaned.get("slot") or ""
        if "|" in slot:
            start, end = slot.split("|", 1)
            cleaned["start"], cleaned["end"] = parse_clock(start), parse_clock(end)
        start, end = cleaned.get("start"), cleaned.get("end")
        if not start or not end:
            raise forms.ValidationError("Lütfen bir saat seçiniz.")
        if start >= end:
            raise forms.ValidationError("Geçersiz saat aralığı.")
        return cleaned

    def payload(self, with_user: bool = False) -> dict:
        d = self.cleaned_data
        body = {
            "providerId": d["provider_id"],
            "date": d["date"].isoformat(),
            "start": d["start"].strftime("%H:%M:%S"),
            "end": d["end"].strftime("%H:%M:%S"),
        }
        if d.get("notes"):
            body["notes"] = d["notes"].strip()
        if with_user:
            body["userId"] = d.get("user_id") or ""
        return body


class CheckInForm(forms.Form):
    appointment_id = forms.IntegerField(min_value=1)


class ProviderNoteForm(forms.Form):
    appointment_id = forms.IntegerField(min_value=1)
    provider_notes = forms.CharField(required=False, max_length=2000, widget=forms.Textarea(attrs={"rows": 3}),
                                     error_messages={"max_length": "Not en fazla 2000 karakter olabilir"})


# ───────────────────────────────────────────────────────────────────────────────
# Walk-in (randevusuz gelen kullanıcı)
# ───────────────────────────────────────────────────────────────────────────────

class WalkInForm(ProfileForm):
    full_name = forms.CharField(label="Ad Soyad", min_length=2, error_messages={
        "required": "Ad Soyad gereklidir",
        "min_length": "Ad Soyad en az 2 karakter olmalıdır.",
    })
    address = forms.CharField(label="Adres", min_length=5, widget=forms.Textarea(attrs={"rows": 3}), error_messages={
        "required": "Adres zorunludur",
        "min_length": "Adres en az 5 karakter olmalıdır.",
    })
    provider_id = forms.IntegerField(label="İlgili", error_messages={"required": "İlgili seçiniz"})
    notes = forms.CharField(label="Not", required=False, max_length=1000, widget=forms.Textarea(attrs={"rows": 2}))

    def payload(self) -> dict:
        body = super().payload()
        body["fullName"] = self.cleaned_data["full_name"]
        body["providerId"] = self.cleaned_data["provider_id"]
        body["notes"] = self.cleaned_data.get("notes") or None
        return body


# ───────────────────────────────────────────────────────────────────────────────
# Görüşmeler (hizmet sağlayıcı)
# ───────────────────────────────────────────────────────────────────────────────

class SessionStartForm(forms.Form):
    appointment_id = forms.IntegerField(min_value=1)
    summary = forms.CharField(max_length=500, error_messages={
        "required": "Lütfen görüşme özeti girin",
        "max_length": "Özet en fazla 500 karakter olabilir",
    })


class VisitSessionForm(forms.Form):
    summary = forms.CharField(label="Özet", max_length=500, error_messages={
        "required": "Görüşme özeti gereklidir",
        "max_length": "Özet en fazla 500 karakter olabilir",
    })
    notes = forms.CharField(label="Notlar", required=False, max_length=2000, widget=forms.Textarea(attrs={"rows": 3}))
    outcome = forms.CharField(label="Sonuç", required=False, max_length=2000, widget=forms.Textarea(attrs={"rows": 3}))
    action_items = forms.CharField(label="Yapılacaklar", required=False, max_length=2000,
                                   widget=forms.Textarea(attrs={"rows": 3}))
    next_session_date = forms.DateField(label="Sonraki görüşme tarihi", required=False, input_formats=["%Y-%m-%d"],
                                        widget=forms.DateInput(attrs={"type": "date"}, format="%Y-%m-%d"))
    next_session_notes = forms.CharField(label="Sonraki görüşme notu", required=False, max_length=1000,
                                         widget=forms.Textarea(attrs={"rows": 2}))
    provider_private_notes = forms.CharField(label="Özel notlarım", required=False, max_length=2000,
                                             widget=forms.Textarea(attrs={"rows": 3}))

    @classmethod
    def initial_from(cls, detail: dict) -> dict:
        return {
            "summary": detail.get("summary") or "",
            "notes": detail.get("notes") or "",
            "outcome": detail.get("outcome") or "",
            "action_items": detail.get("actionItems") or "",
            "next_session_date": (detail.get("nextSessionDate") or "")[:10],
            "next_session_notes": detail.get("nextSessionNotes") or "",
            "provider_private_notes": detail.get("providerPrivateNotes") or "",
        }

    def payload(self) -> dict:
        d = self.cleaned_data
        next_date = d.get("next_session_date")
        return {
            "summary": d["summary"],
            "notes": d.get("notes") or "",
            "outcome": d.get("outcome") or "",
            "actionItems": d.get("action_items") or "",
            "nextSessionDate": next_date.isoformat() if next_date else None,
            "nextSessionNotes": d.get("next_session_notes") or "",
            "providerPrivateNotes": d.get("provider_private_notes") or "",
        }
