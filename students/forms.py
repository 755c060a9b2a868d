# students/forms.py
"""
STUDENT FORMS - validation of registration input.
Input arrives already mapped to model field names (see FieldMapper).
"""
from django import forms
from django.core.exceptions import ValidationError

# SHARED IMPORTS
from shared.constants import GenderChoices
from shared.utils import FieldMapper, parse_modalities, to_decimal

from billing.stats import classify_gender


# ============ CUSTOM FIELDS ============

class MoneyField(forms.Field):
    """Accepts numbers and numeric strings ("120", "120.50", "120,50")."""

    default_error_messages = {
        'invalid': "Enter a valid amount.",
        'negative': "Amount cannot be negative.",
    }

    def to_python(self, value):
        if value in self.empty_values:
            return None
        amount = to_decimal(value)
        if amount is None:
            raise ValidationError(self.error_messages['invalid'], code='invalid')
        return amount

    def validate(self, value):
        super().validate(value)
        if value is not None and value < 0:
            raise ValidationError(self.error_messages['negative'], code='negative')


class ModalityTagsField(forms.Field):
    """A list of tags, a bare tag or a JSON-encoded list; always cleans to a list."""

    def to_python(self, value):
        return parse_modalities(value).tags


# ============ REGISTRATION ============

class StudentRegistrationForm(forms.Form):
    name = forms.CharField(max_length=200, strip=True, error_messages={'required': "Name is required."})
    whatsapp = forms.CharField(max_length=30, strip=True, error_messages={'required': "WhatsApp is required."})
    due_date = forms.DateField(error_messages={'required': "Due date is required."})
    monthly_fee = MoneyField(error_messages={'required': "Monthly fee is required."})
    modalities = ModalityTagsField(error_messages={'required': "Choose at least one modality."})
    classes_per_week = forms.CharField(max_length=50, required=False, strip=True)
    gender = forms.CharField(max_length=20, required=False, strip=True)

    def clean_whatsapp(self):
        whatsapp = FieldMapper.standardize_phone_number(self.cleaned_data.get('whatsapp'))
        if not whatsapp:
            raise ValidationError("WhatsApp must contain digits.")
        return whatsapp

    def clean_gender(self):
        bucket = classify_gender(self.cleaned_data.get('gender'))
        return '' if bucket == GenderChoices.UNSPECIFIED else bucket

    def first_error(self) -> str:
        """First error message, for single-line responses."""
        for errors in self.errors.values():
            if errors:
                return errors[0]
        return "Invalid data."
